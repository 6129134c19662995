from __future__ import annotations

from typing import Any, Literal, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from .errors import PayloadError


class _PayloadModel(BaseModel):
    # The platform sends camelCase keys and adds fields over time.
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
        frozen=True,
    )


class PostUser(_PayloadModel):
    name: str = ""
    user_id: str = ""


class ImageData(_PayloadModel):
    id: str
    extension: str
    width: int = 0
    height: int = 0
    original_url: str
    thumbnail_url: str


class FileData(_PayloadModel):
    id: str
    name: str
    extension: str
    size: int | None = None
    url: str


class TextLink(_PayloadModel):
    url: str


class ArticleBlock(_PayloadModel):
    type: str
    text: str | None = None
    links: list[TextLink] = Field(default_factory=list)
    image_id: str | None = None
    file_id: str | None = None
    embed_id: str | None = None
    url_embed_id: str | None = None


class EmbedData(_PayloadModel):
    service_provider: str
    content_id: str


class UrlEmbed(_PayloadModel):
    type: str
    url: str | None = None
    html: str | None = None


class VideoData(_PayloadModel):
    service_provider: str
    video_id: str


class ArticleBody(_PayloadModel):
    blocks: list[ArticleBlock] = Field(default_factory=list)
    image_map: dict[str, ImageData] = Field(default_factory=dict)
    file_map: dict[str, FileData] = Field(default_factory=dict)
    embed_map: dict[str, EmbedData] = Field(default_factory=dict)
    url_embed_map: dict[str, UrlEmbed] = Field(default_factory=dict)


class ImageBody(_PayloadModel):
    text: str | None = None
    images: list[ImageData | None] = Field(default_factory=list)


class FileBody(_PayloadModel):
    text: str | None = None
    files: list[FileData | None] = Field(default_factory=list)


class EntryBody(_PayloadModel):
    html: str = ""


class VideoBody(_PayloadModel):
    text: str | None = None
    video: VideoData


class TextBody(_PayloadModel):
    text: str | None = None


class BasePost(_PayloadModel):
    """Fields shared by every post type. ``body`` is None when the post is fee-gated."""

    id: str
    type: str
    title: str = ""
    fee_required: int = 0
    published_datetime: str = ""
    user: PostUser = Field(default_factory=PostUser)
    creator_id: str = ""
    tags: list[str] = Field(default_factory=list)
    cover_image_url: str | None = None


class ArticlePost(BasePost):
    type: Literal["article"]
    body: ArticleBody | None = None


class ImagePost(BasePost):
    type: Literal["image"]
    body: ImageBody | None = None


class FilePost(BasePost):
    type: Literal["file"]
    body: FileBody | None = None


class EntryPost(BasePost):
    type: Literal["entry"]
    body: EntryBody | None = None


class VideoPost(BasePost):
    type: Literal["video"]
    body: VideoBody | None = None


class TextPost(BasePost):
    type: Literal["text"]
    body: TextBody | None = None


class UnknownPost(BasePost):
    body: TextBody | None = None


PostPayload = Union[
    ArticlePost,
    ImagePost,
    FilePost,
    EntryPost,
    VideoPost,
    TextPost,
    UnknownPost,
]

_POST_MODELS: dict[str, type[BasePost]] = {
    "article": ArticlePost,
    "image": ImagePost,
    "file": FilePost,
    "entry": EntryPost,
    "video": VideoPost,
    "text": TextPost,
}


def parse_post_payload(item: Mapping[str, Any] | BasePost) -> PostPayload:
    """
    Validate a raw post-info object into the model for its ``type``.

    Types without a dedicated model parse as UnknownPost. Raises PayloadError with
    one line per invalid field.
    """
    if isinstance(item, BasePost):
        return item  # type: ignore[return-value]

    if not isinstance(item, Mapping):
        raise PayloadError(f"Post payload must be a mapping/object, got {type(item).__name__}")

    post_type = item.get("type")
    model = _POST_MODELS.get(post_type) if isinstance(post_type, str) else None

    try:
        return (model or UnknownPost).model_validate(dict(item))  # type: ignore[return-value]
    except ValidationError as e:
        raise PayloadError(_format_payload_errors(e, item.get("id"))) from e


def _format_payload_errors(err: ValidationError, post_id: Any) -> str:
    pid = str(post_id) if post_id is not None else "<unknown>"
    lines: list[str] = [f"Invalid post payload (id={pid}):"]
    for entry in err.errors():
        loc = ".".join(str(part) for part in entry.get("loc", [])) or "<root>"
        msg = entry.get("msg", "invalid value")
        lines.append(f"- {loc}: {msg}")
    return "\n".join(lines)
