# backend_api/routers/comments.py
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from backend_api.db import get_db
from backend_api.policy import Identity, authorize
from backend_api.routers.paging import page_params, search_page_params
from backend_api.schemas import CommentRequest, CommentResponse, MessageResponse, PageResponse
from backend_api.services.base import PageRequest
from backend_api.services.comments import CommentService

router = APIRouter(prefix="/comments", tags=["Comentarios"])


@router.get("", response_model=PageResponse[CommentResponse])
def list_comments(
    paging: PageRequest = Depends(page_params),
    db: Session = Depends(get_db),
    _: Identity = Depends(authorize("comments.list")),
):
    return CommentService(db).list(paging)


@router.get("/search", response_model=PageResponse[CommentResponse])
def search_comments(
    search_term: str = Query(..., alias="searchTerm", min_length=1),
    paging: PageRequest = Depends(search_page_params),
    db: Session = Depends(get_db),
    _=Depends(authorize("comments.search")),
):
    return CommentService(db).search(search_term, paging)


@router.get("/recent", response_model=List[CommentResponse])
def recent_comments(
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    _=Depends(authorize("comments.recent")),
):
    return CommentService(db).recent(limit)


@router.get("/my-comments", response_model=PageResponse[CommentResponse])
def my_comments(
    paging: PageRequest = Depends(search_page_params),
    db: Session = Depends(get_db),
    identity: Identity = Depends(authorize("comments.mine")),
):
    return CommentService(db).list_by_author(identity.user_id, paging)


# ================== Comentarios de un post ==================

@router.get("/post/{post_id}", response_model=PageResponse[CommentResponse])
def comments_by_post(
    post_id: int,
    paging: PageRequest = Depends(search_page_params),
    db: Session = Depends(get_db),
    _=Depends(authorize("comments.by_post")),
):
    return CommentService(db).list_by_post(post_id, paging)


@router.post("/post/{post_id}", response_model=CommentResponse)
def create_comment(
    post_id: int,
    payload: CommentRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(authorize("comments.create")),
):
    return CommentService(db).create(post_id, payload, author=identity)


# ================== Comentario concreto ==================

@router.get("/{comment_id}", response_model=CommentResponse)
def get_comment(
    comment_id: int,
    db: Session = Depends(get_db),
    _=Depends(authorize("comments.get")),
):
    return CommentService(db).get(comment_id)


@router.put("/{comment_id}", response_model=CommentResponse)
def update_comment(
    comment_id: int,
    payload: CommentRequest,
    db: Session = Depends(get_db),
    _: Identity = Depends(authorize("comments.update")),
):
    return CommentService(db).update(comment_id, payload)


@router.delete("/{comment_id}", response_model=MessageResponse)
def delete_comment(
    comment_id: int,
    db: Session = Depends(get_db),
    _: Identity = Depends(authorize("comments.delete")),
):
    CommentService(db).delete(comment_id)
    return {"message": "Comment deleted successfully"}
