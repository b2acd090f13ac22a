from .models_user import User
from .models_tracker import CompareMode, Tracker

__all__ = [
    "User",
    "Tracker",
    "CompareMode",
]
