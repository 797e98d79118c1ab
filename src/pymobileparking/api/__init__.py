"""REST clients for the parking backend."""

from .auth import AuthApi
from .base import BaseApi
from .profile import ProfileApi, normalize_profile

__all__ = ["AuthApi", "BaseApi", "ProfileApi", "normalize_profile"]
