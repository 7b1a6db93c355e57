"""FastAPI HTTP surface for LearnHub identity."""
