"""Source descriptors and provider payload schemas."""

from __future__ import annotations

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, Field, TypeAdapter, field_validator


class ApiSourceDescriptor(BaseModel):
    """Paginated JSON API returning a list of article records."""

    kind: Literal["api"] = "api"
    name: str
    endpoint: str
    params: dict[str, Union[str, int]] = Field(default_factory=dict)
    url_field: str = "url"
    fallback_url_field: str = "canonical_url"


class FeedSourceDescriptor(BaseModel):
    """RSS or Atom syndication feed."""

    kind: Literal["feed"] = "feed"
    name: str
    endpoint: str


SourceDescriptor = Annotated[
    Union[ApiSourceDescriptor, FeedSourceDescriptor],
    Field(discriminator="kind"),
]

source_list_adapter = TypeAdapter(list[SourceDescriptor])


class DevToArticle(BaseModel):
    """One record of the Dev.to /api/articles response."""

    title: str = ""
    url: Optional[str] = None
    canonical_url: Optional[str] = None
    description: Optional[str] = None
    published_at: Optional[str] = None
    created_at: Optional[str] = None
    tag_list: list[str] = Field(default_factory=list)

    model_config = {"extra": "allow"}

    @field_validator("tag_list", mode="before")
    @classmethod
    def _split_tags(cls, value: Any) -> Any:
        # Single-article endpoints return tags as a comma separated string
        if value is None:
            return []
        if isinstance(value, str):
            return [tag.strip() for tag in value.split(",") if tag.strip()]
        return value

    @field_validator("title", mode="before")
    @classmethod
    def _none_title(cls, value: Any) -> Any:
        return value or ""

    def link(self, primary: str, fallback: str) -> str:
        for field in (primary, fallback):
            value = getattr(self, field, None)
            if value:
                return str(value)
        return ""
