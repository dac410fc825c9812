"""
Post and Feed Endpoints.

Endpoints Provided:
- `POST /api/posts`, `GET /api/posts`, `GET /api/posts/{post_id}`,
  `DELETE /api/posts/{post_id}`: Post lifecycle (delete is author only).
- `PUT /api/posts/like/{post_id}`, `PUT /api/posts/unlike/{post_id}`: Toggle the
  caller's like. Both return the post's like list.
- `POST /api/posts/comment/{post_id}`,
  `DELETE /api/posts/comment/{post_id}/{comment_id}`: Add or remove a comment.
  Both return the post's comment list.

Every endpoint in this module requires a valid session token; the gate is
attached once on the router instead of on each handler.
"""

from typing import List

from fastapi import APIRouter, Depends

from api.dependencies import get_current_user_id, get_post_service
from api.schemas import MessageResponse, PostResponse, TextRequest
from core.logging_config import get_logger, log_function_call
from core.models import Comment, Like
from services.post_service import PostService

logger = get_logger(__name__)
router = APIRouter(
    prefix="/api/posts",
    tags=["Posts"],
    dependencies=[Depends(get_current_user_id)],
)


@router.post("", response_model=PostResponse)
@log_function_call(logger)
async def create_post(
    request: TextRequest,
    user_id: str = Depends(get_current_user_id),
    posts: PostService = Depends(get_post_service),
):
    """Create a post"""
    return PostResponse.from_post(await posts.create_post(user_id, request.text))


@router.get("", response_model=List[PostResponse])
@log_function_call(logger)
async def list_posts(posts: PostService = Depends(get_post_service)):
    """Get all posts, newest first"""
    return [PostResponse.from_post(post) for post in await posts.list_posts()]


@router.get("/{post_id}", response_model=PostResponse)
@log_function_call(logger)
async def get_post(post_id: str, posts: PostService = Depends(get_post_service)):
    """Get a post by id"""
    return PostResponse.from_post(await posts.get_post(post_id))


@router.delete("/{post_id}", response_model=MessageResponse)
@log_function_call(logger)
async def delete_post(
    post_id: str,
    user_id: str = Depends(get_current_user_id),
    posts: PostService = Depends(get_post_service),
):
    """Delete a post"""
    await posts.delete_post(user_id, post_id)
    return MessageResponse(message="Post removed.")


@router.put("/like/{post_id}", response_model=List[Like])
@log_function_call(logger)
async def like_post(
    post_id: str,
    user_id: str = Depends(get_current_user_id),
    posts: PostService = Depends(get_post_service),
):
    """Like a post"""
    return await posts.like(user_id, post_id)


@router.put("/unlike/{post_id}", response_model=List[Like])
@log_function_call(logger)
async def unlike_post(
    post_id: str,
    user_id: str = Depends(get_current_user_id),
    posts: PostService = Depends(get_post_service),
):
    """Unlike a post"""
    return await posts.unlike(user_id, post_id)


@router.post("/comment/{post_id}", response_model=List[Comment])
@log_function_call(logger)
async def add_comment(
    post_id: str,
    request: TextRequest,
    user_id: str = Depends(get_current_user_id),
    posts: PostService = Depends(get_post_service),
):
    """Comment on a post"""
    return await posts.add_comment(user_id, post_id, request.text)


@router.delete("/comment/{post_id}/{comment_id}", response_model=List[Comment])
@log_function_call(logger)
async def remove_comment(
    post_id: str,
    comment_id: str,
    user_id: str = Depends(get_current_user_id),
    posts: PostService = Depends(get_post_service),
):
    """Remove a comment from a post"""
    return await posts.remove_comment(user_id, post_id, comment_id)
