import datetime
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Iterable, List, Optional

import httpx

from app.db.github import GitHubError, NotFound
from app.schemas.blog import DecodedPost, PostForm
from app.schemas.github import GitHubFile
from app.services.post_codec import (
    decode,
    encode,
    epoch_millis,
    parse_timestamp,
    synthetic_post,
    utc_now,
)
from app.utils import slugify

logger = logging.getLogger(__name__)

# Faults raised by the remote store; absorbed at this boundary
STORE_ERRORS = (GitHubError, httpx.HTTPError)

FALLBACK_SLUG = "post"
_OLDEST = datetime.datetime.min.replace(tzinfo=datetime.timezone.utc)


class PostsService:
    def __init__(
        self,
        repo,
        parser,
        *,
        clock: Callable[[], datetime.datetime] = utc_now,
        max_workers: int = 1,
    ):
        self.repo = repo
        self.parser = parser
        self.clock = clock
        self.max_workers = max_workers

    def list_posts(self) -> List[DecodedPost]:
        """All posts in the store, newest first. Store faults yield []."""
        try:
            files = self.repo.list_post_files()
        except STORE_ERRORS as e:
            logger.error(f"Error fetching blog posts: {e}")
            return []

        posts = self._load_posts(files)
        # sort is stable, so equal timestamps keep listing order
        posts.sort(key=_created_sort_key, reverse=True)
        return posts

    def get_post(self, slug: str) -> Optional[DecodedPost]:
        if not slug:
            return None

        for post in self.list_posts():
            if post.slug == slug:
                return post

        # Legacy posts were stored as {slug}.md
        if "/" in slug:
            return None
        filename = f"{slug}.md"
        try:
            entry = self.repo.get_post_file(self.repo.path_for(filename))
            markdown = self.parser.get_markdown_content(entry)
        except NotFound:
            return None
        except STORE_ERRORS as e:
            logger.warning(f"Direct fetch failed for {filename}: {e}")
            return None
        return decode(markdown, filename, now=self.clock())

    def save_post(self, form: PostForm) -> bool:
        if not _is_filled(form.title, form.author, form.content):
            logger.warning("Rejected blog post with missing title, author or content")
            return False

        now = self.clock()
        title_slug = slugify(form.title) or FALLBACK_SLUG
        filename = f"{epoch_millis(now)}-{title_slug}.md"
        path = self.repo.path_for(filename)

        try:
            slug = self._unique_slug(title_slug)
            sha = self.repo.get_sha(path)
            content = encode(form, slug, filename, now)
            action = "Update" if sha else "Create"
            self.repo.put_post_file(
                path, content, f"{action} blog post: {form.title}", sha=sha
            )
        except STORE_ERRORS as e:
            logger.error(f"Error saving blog post {filename}: {e}")
            return False

        logger.info(f"Saved blog post {filename} (slug: {slug})")
        return True

    def _unique_slug(self, base: str) -> str:
        """Suffix the slug (-2, -3, ...) when an existing post already uses it."""
        taken = {post.slug for post in self.list_posts()}
        candidate = base
        counter = 2
        while candidate in taken:
            candidate = f"{base}-{counter}"
            counter += 1
        return candidate

    def _load_posts(self, files: Iterable[GitHubFile]) -> List[DecodedPost]:
        files = list(files)
        if self.max_workers <= 1 or len(files) <= 1:
            return [self._load_post(entry) for entry in files]

        workers = min(self.max_workers, len(files))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            # map() yields results in input order
            return list(executor.map(self._load_post, files))

    def _load_post(self, entry: GitHubFile) -> DecodedPost:
        try:
            markdown = self.parser.get_markdown_content(entry)
        except Exception as e:
            logger.error(f"Error processing file {entry.name}: {e}")
            return synthetic_post("", entry.name, now=self.clock())
        return decode(markdown, entry.name, now=self.clock())


def _is_filled(*values: Optional[str]) -> bool:
    return all(value and value.strip() for value in values)


def _created_sort_key(post: DecodedPost) -> datetime.datetime:
    return parse_timestamp(post.createdAt) or _OLDEST
