from fastapi import Depends

from app.db.github import get_github
from app.repos.posts_repo import GitHubPostsRepo
from app.services.content_parser import ContentParser
from app.services.posts_service import PostsService
from app.settings import settings


def get_posts_repo(github=Depends(get_github)):
    return GitHubPostsRepo(github, posts_path=settings.POSTS_PATH)


def get_content_parser(github=Depends(get_github)):
    return ContentParser(github)


def get_posts_service(
    repo=Depends(get_posts_repo),
    parser=Depends(get_content_parser),
):
    return PostsService(
        repo=repo, parser=parser, max_workers=settings.FETCH_CONCURRENCY
    )
