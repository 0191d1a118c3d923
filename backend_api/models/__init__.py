# backend_api/models/__init__.py

# Usuarios
from .user import User, Role

# Publicaciones y comentarios
from .post import Post
from .comment import Comment


__all__ = [
    "User",
    "Role",
    "Post",
    "Comment",
]
