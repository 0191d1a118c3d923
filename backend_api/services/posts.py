# backend_api/services/posts.py
import logging
from typing import List

from sqlalchemy import or_
from sqlalchemy.orm import Session

from backend_api.errors import NotFound
from backend_api.models.post import Post
from backend_api.services.base import Page, PageRequest, paginate

log = logging.getLogger("backend_api.posts")

SORTABLE = {
    "id": Post.id,
    "title": Post.title,
    "isPublished": Post.is_published,
    "createdAt": Post.created_at,
    "updatedAt": Post.updated_at,
}


class PostService:

    def __init__(self, db: Session):
        self.db = db

    # ---------- consultas ----------

    def list_published(self, request: PageRequest) -> Page:
        q = self.db.query(Post).filter(Post.is_published.is_(True))
        return paginate(q, request.with_default_sort("createdAt", "desc"), SORTABLE, Post.id)

    def list_all(self, request: PageRequest) -> Page:
        return paginate(self.db.query(Post), request.with_default_sort("createdAt", "desc"), SORTABLE, Post.id)

    def list_by_author(self, user_id: int, request: PageRequest, published_only: bool = False) -> Page:
        q = self.db.query(Post).filter(Post.user_id == user_id)
        if published_only:
            q = q.filter(Post.is_published.is_(True))
        return paginate(q, request.with_default_sort("createdAt", "desc"), SORTABLE, Post.id)

    def get(self, post_id: int) -> Post:
        post = self.db.get(Post, post_id)
        if not post:
            raise NotFound("Post", post_id)
        return post

    def owner_username(self, post_id: int) -> str:
        return self.get(post_id).author.username

    def search(self, term: str, request: PageRequest) -> Page:
        """Título o contenido, sin distinguir mayúsculas; sólo publicados."""
        q = self.db.query(Post).filter(
            Post.is_published.is_(True),
            or_(
                Post.title.icontains(term, autoescape=True),
                Post.content.icontains(term, autoescape=True),
            ),
        )
        return paginate(q, request.with_default_sort("createdAt", "desc"), SORTABLE, Post.id)

    def recent(self, limit: int = 5) -> List[Post]:
        return (
            self.db.query(Post)
            .filter(Post.is_published.is_(True))
            .order_by(Post.created_at.desc(), Post.id.desc())
            .limit(limit)
            .all()
        )

    def count_by_author(self, user_id: int, published_only: bool = False) -> int:
        q = self.db.query(Post).filter(Post.user_id == user_id)
        if published_only:
            q = q.filter(Post.is_published.is_(True))
        return q.count()

    # ---------- cambios ----------

    def create(self, data, author) -> Post:
        post = Post(
            title=data.title,
            content=data.content,
            is_published=bool(data.is_published),
            user_id=author.user_id,
        )
        self.db.add(post)
        self.db.commit()
        self.db.refresh(post)
        log.info("Post %s creado por %s", post.id, author.username)
        return post

    def update(self, post_id: int, data) -> Post:
        post = self.get(post_id)
        post.title = data.title
        post.content = data.content
        if data.is_published is not None:
            post.is_published = data.is_published
        self.db.commit()
        self.db.refresh(post)
        return post

    def delete(self, post_id: int) -> None:
        # Los comentarios se borran en cascada
        post = self.get(post_id)
        self.db.delete(post)
        self.db.commit()
        log.info("Post %s borrado", post_id)

    def publish(self, post_id: int) -> Post:
        return self._set_published(post_id, True)

    def unpublish(self, post_id: int) -> Post:
        return self._set_published(post_id, False)

    def _set_published(self, post_id: int, published: bool) -> Post:
        post = self.get(post_id)
        if post.is_published != published:
            post.is_published = published
            self.db.commit()
            self.db.refresh(post)
        return post
