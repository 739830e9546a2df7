"""
Post routes
"""
from fastapi import APIRouter, Depends, Query, status
from typing import Optional

from ...schemas import (
    PostRequest, PostResponse, PostListResponse, PostIdResponse, MessageResponse
)
from ...domain.models import PostType
from ...application.services import PostService
from ...config import settings
from ..dependencies import get_post_service, get_current_member_id


router = APIRouter(prefix="/api/v1/posts", tags=["Posts"])


@router.get("", response_model=PostListResponse)
async def get_posts(
    page: int = Query(1, description="1-based page number"),
    size: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
    sort: str = Query("desc", description="Creation time order: asc or desc"),
    post_type: Optional[PostType] = None,
    post_service: PostService = Depends(get_post_service)
):
    """
    Get posts ordered by creation time

    - **page**: Page number (default: 1)
    - **size**: Items per page
    - **sort**: asc or desc (default: desc)
    - **post_type**: Optional GIVER / TAKER filter
    """
    post_page = await post_service.get_posts(page, size, sort, post_type)

    return PostListResponse(
        posts=[PostResponse.model_validate(item) for item in post_page.items],
        total_count=post_page.total_count,
        is_last=post_page.is_last
    )


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: int,
    post_service: PostService = Depends(get_post_service)
):
    """Get post by ID"""
    summary = await post_service.get_post(post_id)
    return PostResponse.model_validate(summary)


@router.post("", response_model=PostIdResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: PostRequest,
    member_id: int = Depends(get_current_member_id),
    post_service: PostService = Depends(get_post_service)
):
    """
    Create a new post

    Requires authentication.
    """
    post_id = await post_service.create_post(post_data.to_draft(), member_id)
    return PostIdResponse(post_id=post_id)


@router.put("/{post_id}", response_model=PostIdResponse)
async def update_post(
    post_id: int,
    post_data: PostRequest,
    member_id: int = Depends(get_current_member_id),
    post_service: PostService = Depends(get_post_service)
):
    """
    Update post

    Requires authentication. Only the author can update.
    """
    updated_id = await post_service.update_post(post_id, post_data.to_draft(), member_id)
    return PostIdResponse(post_id=updated_id)


@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post(
    post_id: int,
    member_id: int = Depends(get_current_member_id),
    post_service: PostService = Depends(get_post_service)
):
    """
    Delete post

    Requires authentication. Only the author can delete.
    """
    await post_service.delete_post(post_id, member_id)
    return MessageResponse(message="Post deleted successfully")
