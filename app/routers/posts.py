import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status

from app import dependencies as deps
from app.schemas.blog import PostDetail, PostForm, PostSummary, SaveResult
from app.security import require_admin
from app.services.posts_service import PostsService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/posts", response_model=List[PostSummary])
def list_posts(service: PostsService = Depends(deps.get_posts_service)):
    """Get all posts metadata, newest first."""
    try:
        return service.list_posts()
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error listing posts: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve posts")


@router.get("/posts/{slug}", response_model=PostDetail)
def get_post(
    slug: str,
    service: PostsService = Depends(deps.get_posts_service),
):
    """Get a single post by slug."""
    try:
        post = service.get_post(slug)
        if not post:
            raise HTTPException(status_code=404, detail="Post not found")
        return post
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error retrieving post {slug}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve post")


@router.post(
    "/posts",
    response_model=SaveResult,
    status_code=status.HTTP_201_CREATED,
    dependencies=[Depends(require_admin)],
)
def create_post(
    form: PostForm,
    service: PostsService = Depends(deps.get_posts_service),
):
    """Commit a new post to the content repository."""
    try:
        saved = service.save_post(form)
    except Exception as e:
        logger.error(f"Unexpected error saving post {form.title!r}: {e}")
        saved = False

    if not saved:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail="Failed to save post, please try again",
        )
    return SaveResult(saved=True)
