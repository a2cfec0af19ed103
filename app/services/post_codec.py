"""
Encode/decode blog posts stored as Markdown files with a quoted front matter
header::

    ---
    title: "Hello"
    author: "Ada"
    ...
    ---

    Markdown body

Decoding never raises: files without a usable header still come back as a
``SyntheticPost`` so one bad file can't break a listing.
"""

import datetime
import logging
import os
import re
from typing import List, Optional

import frontmatter
from frontmatter.default_handlers import BaseHandler

from app.schemas.blog import DecodedPost, ParsedPost, SyntheticPost
from app.utils import slugify

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "Untitled"
UNKNOWN_AUTHOR = "Unknown"
EXCERPT_LENGTH = 150
ELLIPSIS = "..."
MARKER = "---"

_EPOCH = datetime.datetime(1970, 1, 1, tzinfo=datetime.timezone.utc)
_SURROUNDING_QUOTES = re.compile(r"^[\"']|[\"']$")
_LINE_BREAKS = re.compile(r"[\r\n]+")
_LEADING_BLANK_LINES = re.compile(r"^(?:[ \t]*\n)+")


class QuotedFrontMatterHandler(BaseHandler):
    """
    python-frontmatter handler for ``key: "value"`` headers.

    Only the first colon of a line separates key from value, so values such as
    ``"Q&A: Session 1"`` survive intact. Quotes are optional on read and always
    written.
    """

    # BaseHandler.__init__ refuses a handler without FM_BOUNDARY
    FM_BOUNDARY = re.compile(r"^\s*---\s*$", re.MULTILINE)
    START_DELIMITER = MARKER
    END_DELIMITER = MARKER

    def detect(self, text: str) -> bool:
        """The opening marker must be the very first line and must be closed."""
        lines = text.split("\n")
        if not lines or lines[0].strip() != MARKER:
            return False
        return any(line.strip() == MARKER for line in lines[1:])

    def split(self, text: str):
        lines = text.split("\n")
        if not lines or lines[0].strip() != MARKER:
            raise ValueError("front matter must start on the first line")
        for index in range(1, len(lines)):
            if lines[index].strip() == MARKER:
                return "\n".join(lines[1:index]), "\n".join(lines[index + 1 :])
        raise ValueError("front matter is not closed")

    def load(self, fm: str, **kwargs) -> dict:
        metadata = {}
        for line in fm.split("\n"):
            key, sep, value = line.partition(":")
            key, value = key.strip(), value.strip()
            if not sep or not key or not value:
                continue
            metadata[key] = _SURROUNDING_QUOTES.sub("", value)
        return metadata

    def export(self, metadata: dict, **kwargs) -> str:
        return "\n".join(
            f'{key}: "{_flatten(value)}"' for key, value in metadata.items()
        )

    def format(self, post, **kwargs) -> str:
        # Body is written verbatim, unlike the default template which strips it
        metadata = self.export(post.metadata, **kwargs)
        return f"{self.START_DELIMITER}\n{metadata}\n{self.END_DELIMITER}\n\n{post.content}"


HANDLER = QuotedFrontMatterHandler()


def utc_now() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def _as_utc(dt: datetime.datetime) -> datetime.datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=datetime.timezone.utc)
    return dt.astimezone(datetime.timezone.utc)


def iso_timestamp(dt: datetime.datetime) -> str:
    """ISO-8601 in UTC with millisecond precision, e.g. 2024-06-01T09:30:00.000Z"""
    return _as_utc(dt).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def epoch_millis(dt: datetime.datetime) -> int:
    return (_as_utc(dt) - _EPOCH) // datetime.timedelta(milliseconds=1)


def parse_timestamp(value: Optional[str]) -> Optional[datetime.datetime]:
    """Parse a stored ISO-8601 timestamp; None when it isn't one."""
    if not value:
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        return _as_utc(datetime.datetime.fromisoformat(text))
    except ValueError:
        return None


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def make_excerpt(body: str) -> str:
    return f"{body[:EXCERPT_LENGTH]}{ELLIPSIS}"


def parse_tags(value: Optional[str]) -> List[str]:
    if not value:
        return []
    return [tag.strip() for tag in value.split(",") if tag.strip()]


def _flatten(value) -> str:
    if isinstance(value, (list, tuple)):
        value = ", ".join(str(item) for item in value)
    return _LINE_BREAKS.sub(" ", str(value))


def _stem(filename: str) -> str:
    base, _ = os.path.splitext(os.path.basename(filename))
    return base


def _title_from_filename(filename: str) -> str:
    return _stem(filename).replace("-", " ").replace("_", " ")


def decode(
    raw_text: str, filename: str, *, now: Optional[datetime.datetime] = None
) -> DecodedPost:
    """Decode a stored post; falls back to a SyntheticPost instead of raising."""
    now = now or utc_now()
    try:
        text = normalize_newlines(raw_text)
        if not HANDLER.detect(text):
            logger.warning(f"No valid front matter in {filename}, creating basic post")
            return synthetic_post(text, filename, now=now)

        # Not frontmatter.loads: it passes header keys to Post() as kwargs
        fm, body = HANDLER.split(text)
        metadata = HANDLER.load(fm)
        return _parsed_post(metadata, _trim_body(body), filename, now)
    except Exception as e:
        logger.warning(f"Failed to parse post {filename}: {e}")
        return synthetic_post(raw_text or "", filename, now=now)


def _trim_body(body: str) -> str:
    """Drop the blank separator lines and trailing whitespace; keep indentation."""
    return _LEADING_BLANK_LINES.sub("", body).rstrip()


def _parsed_post(metadata: dict, body: str, filename: str, now) -> ParsedPost:
    post_id = _stem(filename)
    stamp = iso_timestamp(now)

    title = metadata.get("title")
    created_at = metadata.get("createdAt")

    return ParsedPost(
        id=post_id,
        slug=metadata.get("slug") or slugify(title or post_id),
        title=title or DEFAULT_TITLE,
        author=metadata.get("author") or UNKNOWN_AUTHOR,
        content=body,
        excerpt=metadata.get("excerpt") or make_excerpt(body),
        createdAt=created_at or stamp,
        updatedAt=metadata.get("updatedAt") or created_at or stamp,
        tags=parse_tags(metadata.get("tags")),
        filename=filename,
    )


def synthetic_post(
    content: str, filename: str, *, now: Optional[datetime.datetime] = None
) -> SyntheticPost:
    stamp = iso_timestamp(now or utc_now())
    post_id = _stem(filename)
    return SyntheticPost(
        id=post_id,
        slug=post_id,
        title=_title_from_filename(filename),
        author=UNKNOWN_AUTHOR,
        content=content,
        excerpt=make_excerpt(content),
        createdAt=stamp,
        updatedAt=stamp,
        tags=[],
        filename=filename,
    )


def encode(form, slug: str, filename: str, timestamp: datetime.datetime) -> str:
    """Serialize submitted form data into the stored post format."""
    stamp = iso_timestamp(timestamp)
    post = frontmatter.Post(
        form.content,
        title=form.title,
        author=form.author,
        createdAt=stamp,
        updatedAt=stamp,
        slug=slug,
        filename=filename,
        excerpt=make_excerpt(form.content),
        tags=", ".join(parse_tags(form.tags)),
    )
    return frontmatter.dumps(post, handler=HANDLER)
