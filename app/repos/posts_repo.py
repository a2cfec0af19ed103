import logging
from typing import List, Optional

from app.db.github import GitHubError, NotFound
from app.schemas.github import GitHubFile
from app.settings import settings

logger = logging.getLogger(__name__)

MARKDOWN_EXTENSION = ".md"


class GitHubPostsRepo:
    def __init__(self, client, posts_path: Optional[str] = None):
        self.client = client
        self.posts_path = (posts_path or settings.POSTS_PATH).strip("/")

    def path_for(self, filename: str) -> str:
        return f"{self.posts_path}/{filename}"

    def list_post_files(self) -> List[GitHubFile]:
        try:
            listing = self.client.get_content(self.posts_path)
        except NotFound:
            logger.info(f"Posts directory {self.posts_path} does not exist yet")
            return []

        if not isinstance(listing, list):
            logger.warning(f"Expected a directory at {self.posts_path}, got a file")
            return []

        return [entry for entry in listing if entry.name.endswith(MARKDOWN_EXTENSION)]

    def get_post_file(self, path: str) -> GitHubFile:
        entry = self.client.get_content(path)
        if isinstance(entry, list):
            raise GitHubError(400, f"Expected file, got directory: {path}")
        return entry

    def get_sha(self, path: str) -> Optional[str]:
        try:
            entry = self.client.get_content(path)
        except NotFound:
            return None
        if isinstance(entry, list):
            return None
        return entry.sha

    def put_post_file(
        self, path: str, content: str, message: str, sha: Optional[str] = None
    ) -> dict:
        return self.client.create_or_update_file(path, content, message, sha=sha)
