from .college import College
from .user import User

__all__ = [
    "College",
    "User",
]
