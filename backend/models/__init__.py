from .user import User
from .chirp import Chirp

__all__ = [
    "User",
    "Chirp",
]
