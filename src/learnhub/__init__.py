"""LearnHub - identity backend for the learning platform."""
