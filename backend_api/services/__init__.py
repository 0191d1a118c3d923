# backend_api/services/__init__.py

from .base import Page, PageRequest
from .users import UserService
from .posts import PostService
from .comments import CommentService
from .auth import AuthService


__all__ = [
    "Page",
    "PageRequest",
    "UserService",
    "PostService",
    "CommentService",
    "AuthService",
]
