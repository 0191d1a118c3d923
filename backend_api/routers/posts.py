# backend_api/routers/posts.py
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from backend_api.db import get_db
from backend_api.policy import Identity, authorize
from backend_api.routers.paging import page_params, search_page_params
from backend_api.schemas import (
    MessageResponse,
    PageResponse,
    PostRequest,
    PostResponse,
    PostUpdateRequest,
)
from backend_api.services.base import PageRequest
from backend_api.services.posts import PostService

router = APIRouter(prefix="/posts", tags=["Posts"])


# ================== Listados ==================

@router.get("", response_model=PageResponse[PostResponse])
def list_published_posts(
    paging: PageRequest = Depends(page_params),
    db: Session = Depends(get_db),
    _=Depends(authorize("posts.list_published")),
):
    return PostService(db).list_published(paging)


@router.get("/all", response_model=PageResponse[PostResponse])
def list_all_posts(
    paging: PageRequest = Depends(page_params),
    db: Session = Depends(get_db),
    _: Identity = Depends(authorize("posts.list_all")),
):
    return PostService(db).list_all(paging)


@router.get("/search", response_model=PageResponse[PostResponse])
def search_posts(
    search_term: str = Query(..., alias="searchTerm", min_length=1),
    paging: PageRequest = Depends(search_page_params),
    db: Session = Depends(get_db),
    _=Depends(authorize("posts.search")),
):
    return PostService(db).search(search_term, paging)


@router.get("/recent", response_model=List[PostResponse])
def recent_posts(
    limit: int = Query(5, ge=1, le=100),
    db: Session = Depends(get_db),
    _=Depends(authorize("posts.recent")),
):
    return PostService(db).recent(limit)


@router.get("/my-posts", response_model=PageResponse[PostResponse])
def my_posts(
    published_only: bool = Query(False, alias="publishedOnly"),
    paging: PageRequest = Depends(page_params),
    db: Session = Depends(get_db),
    identity: Identity = Depends(authorize("posts.mine")),
):
    return PostService(db).list_by_author(identity.user_id, paging, published_only)


# ================== CRUD ==================

@router.get("/{post_id}", response_model=PostResponse)
def get_post(
    post_id: int,
    db: Session = Depends(get_db),
    _=Depends(authorize("posts.get")),
):
    return PostService(db).get(post_id)


@router.post("", response_model=PostResponse)
def create_post(
    payload: PostRequest,
    db: Session = Depends(get_db),
    identity: Identity = Depends(authorize("posts.create")),
):
    return PostService(db).create(payload, author=identity)


@router.put("/{post_id}", response_model=PostResponse)
def update_post(
    post_id: int,
    payload: PostUpdateRequest,
    db: Session = Depends(get_db),
    _: Identity = Depends(authorize("posts.update")),
):
    return PostService(db).update(post_id, payload)


@router.delete("/{post_id}", response_model=MessageResponse)
def delete_post(
    post_id: int,
    db: Session = Depends(get_db),
    _: Identity = Depends(authorize("posts.delete")),
):
    PostService(db).delete(post_id)
    return {"message": "Post deleted successfully"}


# ================== Publicar / despublicar ==================

@router.put("/{post_id}/publish", response_model=PostResponse)
def publish_post(
    post_id: int,
    db: Session = Depends(get_db),
    _: Identity = Depends(authorize("posts.publish")),
):
    return PostService(db).publish(post_id)


@router.put("/{post_id}/unpublish", response_model=PostResponse)
def unpublish_post(
    post_id: int,
    db: Session = Depends(get_db),
    _: Identity = Depends(authorize("posts.unpublish")),
):
    return PostService(db).unpublish(post_id)
