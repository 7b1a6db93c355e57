from enum import Enum


class UserRole(str, Enum):
    """Platform roles. New accounts are students unless stated otherwise."""

    STUDENT = "student"
    INSTRUCTOR = "instructor"
    ADMIN = "admin"
