import base64
import binascii
import logging

from app.schemas.github import GitHubFile

logger = logging.getLogger(__name__)


class ContentParser:
    def __init__(self, client):
        self.client = client

    def get_markdown_content(self, entry: GitHubFile) -> str:
        """Get the full markdown content of a file entry (decoded as text)."""
        raw = self._get_raw_content(entry)
        if isinstance(raw, bytes):
            return raw.decode("utf-8", errors="ignore")
        return raw or ""

    def _get_raw_content(self, entry: GitHubFile) -> str | bytes | None:
        """Internal helper: inline base64 payload, else a raw download."""
        if entry.content and entry.encoding == "base64":
            try:
                # GitHub wraps base64 payloads at 60 columns
                return base64.b64decode("".join(entry.content.split()), validate=True)
            except (binascii.Error, ValueError):
                logger.warning(f"Invalid base64 payload for {entry.path}, using raw download")
        elif entry.content:
            return entry.content

        # Files over 1 MB come back without inline content
        return self.client.get_raw(entry.path)
