from typing import Optional

from pydantic import BaseModel


class GitHubFile(BaseModel):
    """Entry returned by the GitHub contents API (listing item or single file)."""

    name: str
    path: str
    type: str = "file"
    sha: str
    size: int = 0
    url: Optional[str] = None
    html_url: Optional[str] = None
    download_url: Optional[str] = None
    # Only present when a single file is requested
    content: Optional[str] = None
    encoding: Optional[str] = None
