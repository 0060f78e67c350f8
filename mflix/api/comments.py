"""
Movie comment endpoints.

Updates and deletes are scoped by the requester email: a comment that exists
but belongs to someone else is reported as not found.
"""

import structlog
from bson import ObjectId
from fastapi import APIRouter, Depends, Query, status

from ..core.exceptions import NotFoundError
from ..database.repositories.comment_repository import CommentRepository
from ..models.comment import Comment, CommentCreate, CommentUpdate, Critic
from .dependencies.repositories import get_comment_repository

logger = structlog.get_logger()

router = APIRouter(prefix="/api/comments", tags=["comments"])


@router.get("/report/most-active", response_model=list[Critic])
async def most_active_commenters(
    repo: CommentRepository = Depends(get_comment_repository),
) -> list[Critic]:
    """Top 20 users ranked by number of comments."""
    return await repo.most_active_commenters()


@router.get("/{comment_id}", response_model=Comment)
async def get_comment(
    comment_id: str,
    repo: CommentRepository = Depends(get_comment_repository),
) -> Comment:
    """Get a comment by id."""
    comment = await repo.get_comment(comment_id)
    if comment is None:
        raise NotFoundError(f"Comment {comment_id} not found", comment_id=comment_id)
    return comment


@router.post("", status_code=status.HTTP_201_CREATED, response_model=Comment)
async def add_comment(
    comment_create: CommentCreate,
    repo: CommentRepository = Depends(get_comment_repository),
) -> Comment:
    """
    Post a comment on a movie.

    **Request Body**:
    ```json
    {"movie_id": "573a1390f29313caabcd4323", "name": "...", "email": "...", "text": "..."}
    ```
    """
    comment = Comment(
        id=str(ObjectId()),
        movie_id=comment_create.movie_id,
        name=comment_create.name,
        email=comment_create.email,
        text=comment_create.text,
    )
    return await repo.add_comment(comment)


@router.put("/{comment_id}", response_model=Comment)
async def update_comment(
    comment_id: str,
    update: CommentUpdate,
    repo: CommentRepository = Depends(get_comment_repository),
) -> Comment:
    """Edit the text of a comment owned by the requester."""
    updated = await repo.update_comment(comment_id, update.text, update.email)
    if not updated:
        raise NotFoundError(
            f"Comment {comment_id} not found for {update.email}",
            comment_id=comment_id,
        )

    comment = await repo.get_comment(comment_id)
    if comment is None:
        raise NotFoundError(f"Comment {comment_id} not found", comment_id=comment_id)
    return comment


@router.delete("/{comment_id}")
async def delete_comment(
    comment_id: str,
    email: str = Query(..., description="Email of the requesting user"),
    repo: CommentRepository = Depends(get_comment_repository),
) -> dict[str, bool]:
    """Delete a comment owned by the requester."""
    deleted = await repo.delete_comment(comment_id, email)
    if not deleted:
        raise NotFoundError(
            f"Comment {comment_id} not found for {email}", comment_id=comment_id
        )
    return {"deleted": True}
