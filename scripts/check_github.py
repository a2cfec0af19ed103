import logging

from app.db.github import GitHubClient, GitHubError
from app.repos.posts_repo import GitHubPostsRepo
from app.settings import settings

logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")
logger = logging.getLogger(__name__)


def check_connection(client: GitHubClient, posts_path: str) -> bool:
    """Report configuration and list the posts directory."""
    logger.info(f"GITHUB_TOKEN: {'SET' if settings.GITHUB_TOKEN else 'NOT SET'}")
    logger.info(f"GITHUB_OWNER: {settings.GITHUB_OWNER or 'NOT SET'}")
    logger.info(f"GITHUB_REPO: {settings.GITHUB_REPO or 'NOT SET'}")
    logger.info(f"Repository: {settings.repo_url}")

    try:
        listing = client.get_content(posts_path)
    except GitHubError as e:
        logger.error(f"Posts directory check failed: {e}")
        return False

    if not isinstance(listing, list):
        logger.warning(f"{posts_path} is not a directory: {listing.path}")
        return False

    logger.info(f"Posts directory found with {len(listing)} entries:")
    for entry in listing:
        logger.info(f"  {entry.name} ({entry.type})")

    markdown = GitHubPostsRepo(client, posts_path=posts_path).list_post_files()
    logger.info(f"{len(markdown)} markdown post(s)")
    return True


if __name__ == "__main__":
    with GitHubClient.from_settings(settings) as github:
        ok = check_connection(github, settings.POSTS_PATH)
    raise SystemExit(0 if ok else 1)
