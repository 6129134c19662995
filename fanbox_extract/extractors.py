from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable

from .config_schema import SaveSettings
from .embeds import EmbedReference, resolve_embed_links
from .filters import ResourceGate
from .links import extract_text_links, strip_html_tags, url_embed_link
from .naming import split_url_name_ext
from .payload import (
    ArticlePost,
    BasePost,
    EntryPost,
    FileData,
    FilePost,
    ImageData,
    ImagePost,
    VideoPost,
)
from .result import ExtractionResult, FileCandidate

_ANCHOR_TAG_RE = re.compile(r"<a(?:\s[^>]*)?>")
_ANCHOR_IMAGE_URL_RE = re.compile(r"https://[^\"'\s<>]*\.(?:jpeg|jpg|png|gif|bmp)")
_WIDTH_ATTR_RE = re.compile(r'width="(\d*)"')
_HEIGHT_ATTR_RE = re.compile(r'height="(\d*)"')


@dataclass
class ExtractionContext:
    """
    Mutable state for one post while its resources are collected.

    ``index`` is the running file index: 0 is the cover, and every discovered
    resource takes the next value whether or not the gate accepts it.
    """

    post_id: str
    result: ExtractionResult
    settings: SaveSettings
    gate: ResourceGate
    index: int = 0

    def next_index(self) -> int:
        self.index += 1
        return self.index

    def add_image(self, image: ImageData) -> FileCandidate | None:
        index = self.next_index()
        if not self.gate.candidate_allowed(image.extension):
            return None

        candidate = FileCandidate(
            file_id=image.id,
            name=image.id,
            ext=image.extension,
            size=None,
            index=index,
            url=image.original_url,
            retry_url=image.thumbnail_url,
        )
        self.result.files.append(candidate)
        return candidate

    def add_file(self, file: FileData) -> FileCandidate | None:
        index = self.next_index()
        if not self.gate.candidate_allowed(file.extension):
            return None

        candidate = FileCandidate(
            file_id=file.id,
            name=file.name,
            ext=file.extension,
            size=file.size,
            index=index,
            url=file.url,
            retry_url=None,
        )
        self.result.files.append(candidate)
        return candidate

    def add_text_links(self, text: str) -> None:
        self.result.links.extend(extract_text_links(text, enabled=self.settings.save_link))

    def add_embed_links(self, refs: Iterable[EmbedReference]) -> None:
        links = resolve_embed_links(refs, enabled=self.settings.save_link, post_id=self.post_id)
        self.result.links.extend(links)


def body_text(post: BasePost) -> str:
    """Plain text of a non-article body; entry HTML has its tags removed."""
    body = getattr(post, "body", None)
    if body is None or isinstance(post, ArticlePost):
        return ""
    if isinstance(post, EntryPost):
        return strip_html_tags(body.html)
    return getattr(body, "text", None) or ""


def extract_article(post: ArticlePost, ctx: ExtractionContext) -> None:
    body = post.body
    if body is None:
        return

    link_sources: list[str] = []
    paragraphs: list[str] = []
    for block in body.blocks:
        if block.type == "p" and block.text:
            link_sources.append(block.text)
            link_sources.extend(link.url for link in block.links)
            paragraphs.append(block.text)

    for source in link_sources:
        ctx.add_text_links(source)

    text = "\n\n".join(paragraphs)
    if ctx.settings.save_text and text:
        ctx.result.links.append(text)

    for block in body.blocks:
        if block.type != "image":
            continue
        image = body.image_map.get(block.image_id or "")
        if image is None:
            continue
        ctx.add_image(image)

    for block in body.blocks:
        if block.type != "file":
            continue
        file = body.file_map.get(block.file_id or "")
        if file is None:
            continue
        ctx.add_file(file)

    ctx.add_embed_links(
        EmbedReference(provider=e.service_provider, content_id=e.content_id)
        for e in body.embed_map.values()
    )

    if ctx.settings.save_link:
        urls: list[str] = []
        for embed in body.url_embed_map.values():
            link = url_embed_link(embed)
            if link:
                urls.append(link)
        if urls:
            ctx.result.links.append("\n\n".join(urls))


def extract_image(post: ImagePost, ctx: ExtractionContext) -> None:
    if post.body is None:
        return
    for image in post.body.images:
        if image is None:
            continue
        ctx.add_image(image)


def extract_file(post: FilePost, ctx: ExtractionContext) -> None:
    if post.body is None:
        return
    for file in post.body.files:
        if file is None:
            continue
        ctx.add_file(file)


def _int_attr(pattern: re.Pattern[str], markup: str) -> int:
    match = pattern.search(markup)
    if match and match.group(1):
        return int(match.group(1))
    return 0


def extract_entry(post: EntryPost, ctx: ExtractionContext) -> None:
    if post.body is None:
        return

    for anchor in _ANCHOR_TAG_RE.findall(post.body.html):
        match = _ANCHOR_IMAGE_URL_RE.search(anchor)
        if not match:
            continue

        url = match.group(0)
        parts = split_url_name_ext(url)
        image = ImageData(
            id=parts.name,
            extension=parts.ext,
            width=_int_attr(_WIDTH_ATTR_RE, anchor),
            height=_int_attr(_HEIGHT_ATTR_RE, anchor),
            original_url=url,
            thumbnail_url=url,
        )
        ctx.add_image(image)


def extract_video(post: VideoPost, ctx: ExtractionContext) -> None:
    if post.body is None:
        return
    video = post.body.video
    ctx.add_embed_links([EmbedReference(provider=video.service_provider, content_id=video.video_id)])


def extract_nothing(post: BasePost, ctx: ExtractionContext) -> None:
    _ = (post, ctx)


EXTRACTORS: dict[str, Callable[[Any, ExtractionContext], None]] = {
    "article": extract_article,
    "image": extract_image,
    "file": extract_file,
    "entry": extract_entry,
    "video": extract_video,
    "text": extract_nothing,
}


def extract_body(post: BasePost, ctx: ExtractionContext) -> bool:
    """
    Run the extractor registered for the post's type.

    Returns False when the type has no extractor (nothing beyond the body text
    is collected for it).
    """
    extractor = EXTRACTORS.get(post.type)
    if extractor is None:
        return False
    extractor(post, ctx)
    return True
