# backend_api/services/comments.py
import logging
from typing import List

from sqlalchemy.orm import Session

from backend_api.errors import NotFound
from backend_api.models.comment import Comment
from backend_api.models.post import Post
from backend_api.services.base import Page, PageRequest, paginate

log = logging.getLogger("backend_api.comments")

SORTABLE = {
    "id": Comment.id,
    "createdAt": Comment.created_at,
    "updatedAt": Comment.updated_at,
}


class CommentService:

    def __init__(self, db: Session):
        self.db = db

    def list(self, request: PageRequest) -> Page:
        return paginate(self.db.query(Comment), request.with_default_sort("createdAt", "desc"), SORTABLE, Comment.id)

    def get(self, comment_id: int) -> Comment:
        comment = self.db.get(Comment, comment_id)
        if not comment:
            raise NotFound("Comment", comment_id)
        return comment

    def owner_username(self, comment_id: int) -> str:
        return self.get(comment_id).author.username

    def list_by_post(self, post_id: int, request: PageRequest) -> Page:
        self._require_post(post_id)
        q = self.db.query(Comment).filter(Comment.post_id == post_id)
        return paginate(q, request.with_default_sort("createdAt", "desc"), SORTABLE, Comment.id)

    def list_by_author(self, user_id: int, request: PageRequest) -> Page:
        q = self.db.query(Comment).filter(Comment.user_id == user_id)
        return paginate(q, request.with_default_sort("createdAt", "desc"), SORTABLE, Comment.id)

    def search(self, term: str, request: PageRequest) -> Page:
        q = self.db.query(Comment).filter(Comment.content.icontains(term, autoescape=True))
        return paginate(q, request.with_default_sort("createdAt", "desc"), SORTABLE, Comment.id)

    def recent(self, limit: int = 10) -> List[Comment]:
        return (
            self.db.query(Comment)
            .order_by(Comment.created_at.desc(), Comment.id.desc())
            .limit(limit)
            .all()
        )

    def count_by_post(self, post_id: int) -> int:
        return self.db.query(Comment).filter(Comment.post_id == post_id).count()

    def create(self, post_id: int, data, author) -> Comment:
        self._require_post(post_id)
        comment = Comment(content=data.content, post_id=post_id, user_id=author.user_id)
        self.db.add(comment)
        self.db.commit()
        self.db.refresh(comment)
        log.info("Comentario %s en post %s por %s", comment.id, post_id, author.username)
        return comment

    def update(self, comment_id: int, data) -> Comment:
        comment = self.get(comment_id)
        comment.content = data.content
        self.db.commit()
        self.db.refresh(comment)
        return comment

    def delete(self, comment_id: int) -> None:
        comment = self.get(comment_id)
        self.db.delete(comment)
        self.db.commit()

    def _require_post(self, post_id: int) -> Post:
        post = self.db.get(Post, post_id)
        if not post:
            raise NotFound("Post", post_id)
        return post
