"""Typed CMS entities returned by the content gateway."""

from __future__ import annotations

from typing import Generic, Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class PageInfo(_Frozen):
    has_next_page: bool = False
    end_cursor: str | None = None


class Page(_Frozen, Generic[T]):
    """Cursor-pagination envelope."""

    nodes: list[T] = Field(default_factory=list)
    page_info: PageInfo = Field(default_factory=PageInfo)

    @classmethod
    def empty(cls) -> Page[T]:
        return cls(nodes=[], page_info=PageInfo(has_next_page=False, end_cursor=None))


class FeaturedImage(_Frozen):
    source_url: str
    alt_text: str = ""
    width: int | None = None
    height: int | None = None


class Author(_Frozen):
    id: str
    database_id: int | None = None
    name: str = ""
    slug: str
    description: str = ""
    avatar_url: str | None = None
    posts: list[Post] | None = None


class Tag(_Frozen):
    id: str
    database_id: int | None = None
    name: str = ""
    slug: str
    description: str = ""
    posts: list[Post] | None = None


class Category(_Frozen):
    id: str
    database_id: int | None = None
    name: str = ""
    slug: str
    description: str = ""
    posts: Page[Post] | None = None


class Post(_Frozen):
    id: str
    database_id: int | None = None
    title: str = ""
    slug: str
    excerpt: str = ""
    content: str | None = None
    date: str | None = None
    modified: str | None = None
    featured_image: FeaturedImage | None = None
    author: Author | None = None
    categories: list[Category] = Field(default_factory=list)
    tags: list[Tag] = Field(default_factory=list)

    @property
    def primary_category_slug(self) -> str | None:
        return self.categories[0].slug if self.categories else None


class SEOMetadata(_Frozen):
    """Page metadata consumed by the rendering layer."""

    title: str
    description: str
    url: str
    image: str | None = None
    type: Literal["website", "article"] = "website"
    author: str | None = None
    published_date: str | None = None
    modified_date: str | None = None


Author.model_rebuild()
Tag.model_rebuild()
Category.model_rebuild()
Post.model_rebuild()
