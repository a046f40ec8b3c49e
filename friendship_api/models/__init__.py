from .user import User
from .friendship import Friendship

__all__ = ["User", "Friendship"]
