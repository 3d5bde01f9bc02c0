"""Post API endpoints."""

from collections.abc import Callable, Coroutine
from typing import Annotated, Any

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.routing import APIRoute
from sqlalchemy.orm import Session

from src.api.dependencies import get_current_user_id
from src.database import get_db
from src.errors import ValidationError
from src.schemas.post import MessageResponse, PostCreate, PostResponse, PostUpdate
from src.services import posts as post_service


class PostRoute(APIRoute):
    """Report body validation failures on post routes as 400."""

    def get_route_handler(self) -> Callable[[Request], Coroutine[Any, Any, Response]]:
        original_route_handler = super().get_route_handler()

        async def route_handler(request: Request) -> Response:
            try:
                return await original_route_handler(request)
            except RequestValidationError as e:
                raise ValidationError.from_pydantic(
                    e.errors(), status_code=status.HTTP_400_BAD_REQUEST
                ) from e

        return route_handler


router = APIRouter(prefix="/api/posts", tags=["posts"], route_class=PostRoute)


@router.post("", response_model=PostResponse)
async def create_post(
    post_data: PostCreate,
    user_id: Annotated[int, Depends(get_current_user_id)],
    db: Annotated[Session, Depends(get_db)],
):
    """Create a new post owned by the current user."""
    return post_service.create_post(db, user_id, post_data.title, post_data.body)


@router.get("", response_model=list[PostResponse])
async def get_posts(
    user_id: Annotated[int, Depends(get_current_user_id)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get all posts, newest first."""
    return post_service.list_posts(db)


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: str,
    user_id: Annotated[int, Depends(get_current_user_id)],
    db: Annotated[Session, Depends(get_db)],
):
    """Get a specific post."""
    return post_service.get_post_or_404(db, post_id)


@router.put("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: str,
    post_data: PostUpdate,
    user_id: Annotated[int, Depends(get_current_user_id)],
    db: Annotated[Session, Depends(get_db)],
):
    """Update a post (owner only)."""
    return post_service.update_post(
        db, post_id, user_id, title=post_data.title, body=post_data.body
    )


@router.delete("/{post_id}", response_model=MessageResponse)
async def delete_post(
    post_id: str,
    user_id: Annotated[int, Depends(get_current_user_id)],
    db: Annotated[Session, Depends(get_db)],
):
    """Delete a post (owner only)."""
    post_service.delete_post(db, post_id, user_id)
    return MessageResponse(msg="Post removed")
