"""Post Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - PostWrite.title: 1-500 chars, stripped, non-empty
    - PostWrite.slug optional: generated from the title when omitted
    - Categories stripped; blanks dropped later by the Post value itself
    - FileUpload.data is base64 in JSON, raw bytes after validation
"""

from datetime import datetime

from pydantic import Base64Bytes, BaseModel, Field, field_validator

from blogcore.core.post import Post


class PostWrite(BaseModel):
    """Create/update payload — author-controlled fields only."""
    title: str = Field(min_length=1, max_length=500)
    slug: str | None = Field(None, max_length=200, pattern=r"^[^\s/?#]+$")
    excerpt: str = Field("", max_length=2000)
    content: str = ""
    pub_date: datetime | None = None
    is_published: bool = True
    categories: list[str] = Field(default_factory=list, max_length=50)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title cannot be empty or whitespace")
        return v

    @field_validator("categories")
    @classmethod
    def strip_categories(cls, v: list[str]) -> list[str]:
        return [c.strip() for c in v]


class PostResponse(BaseModel):
    """Public-facing post data."""
    id: str
    slug: str
    title: str
    excerpt: str
    content: str
    pub_date: datetime
    last_modified: datetime
    is_published: bool
    categories: list[str]

    @classmethod
    def from_post(cls, post: Post) -> "PostResponse":
        return cls(
            id=post.id,
            slug=post.slug,
            title=post.title,
            excerpt=post.excerpt,
            content=post.content,
            pub_date=post.pub_date,
            last_modified=post.last_modified,
            is_published=post.is_published,
            categories=list(post.categories),
        )


class PostPage(BaseModel):
    """One page of the post listing."""
    page: int
    page_size: int
    posts: list[PostResponse]
    has_more: bool


class FileUpload(BaseModel):
    """Attachment upload — JSON body with base64 content."""
    file_name: str = Field(min_length=1, max_length=255)
    suffix: str | None = Field(None, max_length=64)
    data: Base64Bytes


class FileUploadResponse(BaseModel):
    url: str
