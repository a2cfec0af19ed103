import base64
import datetime
import textwrap

from app.db.github import Conflict, GitHubError, NotFound
from app.schemas.github import GitHubFile


def make_entry(path: str, sha: str = "sha-1", content: str | None = None) -> GitHubFile:
    name = path.rsplit("/", 1)[-1]
    if content is None:
        return GitHubFile(name=name, path=path, sha=sha)
    return GitHubFile(
        name=name,
        path=path,
        sha=sha,
        content=base64.b64encode(content.encode("utf-8")).decode("ascii"),
        encoding="base64",
    )


class FakeGitHub:
    """
    Minimal in-memory GitHub contents API stand-in.
    Files map path -> text; directories are derived from path prefixes.
    Set track_calls=True to record the order of calls.
    """

    def __init__(self, files: dict | None = None, track_calls: bool = False):
        self.files = dict(files or {})
        self.shas = {path: f"sha-{i}" for i, path in enumerate(self.files)}
        self.track_calls = track_calls
        self.calls = []
        self.commits = []
        self.failing_paths = set()

    def get_content(self, path: str):
        if self.track_calls:
            self.calls.append(("get_content", path))
        if path in self.failing_paths:
            raise GitHubError(500, "boom")
        if path in self.files:
            return make_entry(path, self.shas[path], self.files[path])

        prefix = f"{path.rstrip('/')}/"
        children = [p for p in self.files if p.startswith(prefix)]
        if not children:
            raise NotFound(404, "Not Found")
        return [make_entry(p, self.shas[p]) for p in children]

    def get_raw(self, path: str) -> str:
        if path not in self.files:
            raise NotFound(404, "Not Found")
        return self.files[path]

    def create_or_update_file(self, path, content, message, sha=None):
        if self.track_calls:
            self.calls.append(("create_or_update_file", path))
        if path in self.files and sha != self.shas[path]:
            raise Conflict(409, f"{path} does not match {sha}")
        self.files[path] = content
        self.shas[path] = f"sha-{len(self.commits) + 100}"
        self.commits.append({"path": path, "content": content, "message": message, "sha": sha})
        return {"content": {"path": path, "sha": self.shas[path]}}


class FakeRepo:
    """
    Minimal repo stand-in used in service tests.
    """

    def __init__(self, entries=None, shas=None, fail_listing=False, fail_write=False):
        self.entries = list(entries or [])
        self.shas = dict(shas or {})
        self.fail_listing = fail_listing
        self.fail_write = fail_write
        self.puts = []
        self.fetched = []

    def path_for(self, filename):
        return f"posts/{filename}"

    def list_post_files(self):
        if self.fail_listing:
            raise GitHubError(503, "unavailable")
        return list(self.entries)

    def get_post_file(self, path):
        self.fetched.append(path)
        for entry in self.entries:
            if entry.path == path:
                return entry
        raise NotFound(404, "Not Found")

    def get_sha(self, path):
        return self.shas.get(path)

    def put_post_file(self, path, content, message, sha=None):
        if self.fail_write:
            raise Conflict(409, "sha mismatch")
        self.puts.append({"path": path, "content": content, "message": message, "sha": sha})
        return {}


class FakeParser:
    """
    Minimal markdown/content parser stand-in keyed by file path.
    """

    def __init__(self, content_by_path: dict[str, str]):
        self.content_by_path = content_by_path

    def get_markdown_content(self, entry) -> str:
        raw = self.content_by_path.get(entry.path)
        if raw is None:
            raise NotFound(404, entry.path)
        if isinstance(raw, Exception):
            raise raw
        return textwrap.dedent(raw).lstrip()


class FakePostsService:
    """
    Minimal posts service stand-in for router tests.
    """

    def __init__(self, list_posts_return=None, get_post_return=None, save_post_return=True):
        self._list_posts_return = list_posts_return or []
        self._get_post_return = get_post_return
        self._save_post_return = save_post_return
        self.saved = []

    def list_posts(self):
        return self._list_posts_return

    def get_post(self, slug: str):
        return self._get_post_return

    def save_post(self, form):
        self.saved.append(form)
        return self._save_post_return


class FixedClock:
    def __init__(self, now: datetime.datetime):
        self.now = now

    def __call__(self) -> datetime.datetime:
        return self.now
