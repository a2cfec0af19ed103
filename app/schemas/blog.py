from typing import List, Literal, Union

from pydantic import BaseModel, Field


class BlogPost(BaseModel):
    id: str
    slug: str
    title: str
    author: str
    content: str
    excerpt: str
    createdAt: str
    updatedAt: str
    tags: List[str] = Field(default_factory=list)
    filename: str


class ParsedPost(BlogPost):
    """Post decoded from well-formed front matter."""

    kind: Literal["parsed"] = "parsed"

    @property
    def is_synthetic(self) -> bool:
        return False


class SyntheticPost(BlogPost):
    """Best-effort post recovered from a file without usable front matter."""

    kind: Literal["synthetic"] = "synthetic"

    @property
    def is_synthetic(self) -> bool:
        return True


DecodedPost = Union[ParsedPost, SyntheticPost]


class PostSummary(BaseModel):
    id: str
    slug: str
    title: str
    author: str
    excerpt: str
    createdAt: str
    updatedAt: str
    tags: List[str] = Field(default_factory=list)
    kind: Literal["parsed", "synthetic"] = "parsed"


class PostDetail(PostSummary):
    content: str


class PostForm(BaseModel):
    title: str = Field(min_length=1)
    author: str = Field(min_length=1)
    content: str = Field(min_length=1)
    tags: str = ""  # comma-separated


class SaveResult(BaseModel):
    saved: bool
