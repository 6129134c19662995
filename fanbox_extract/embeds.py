from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Literal

from .errors import UnknownProviderError

EmbedProvider = Literal[
    "youtube",
    "fanbox",
    "gist",
    "soundcloud",
    "vimeo",
    "twitter",
    "google_forms",
]

# Downstream consumers match on these exact strings.
PROVIDER_PREFIXES: dict[EmbedProvider, str] = {
    "youtube": "https://www.youtube.com/watch?v=",
    "fanbox": "https://www.fanbox.cc/",
    "gist": "https://gist.github.com/",
    "soundcloud": "https://soundcloud.com/",
    "vimeo": "https://vimeo.com/",
    "twitter": "https://twitter.com/i/web/status/",
    "google_forms": "https://docs.google.com/forms/d/e/",
}


@dataclass(frozen=True)
class EmbedReference:
    # Payload values are not narrowed; the prefix table lookup rejects unknown ones.
    provider: EmbedProvider | str
    content_id: str


def resolve_embed_link(ref: EmbedReference, *, post_id: str | None = None) -> str:
    prefix = PROVIDER_PREFIXES.get(ref.provider)
    if prefix is None:
        raise UnknownProviderError(ref.provider, post_id=post_id)

    link = prefix + ref.content_id
    if ref.provider == "google_forms":
        link += "/viewform"
    return link


def resolve_embed_links(
    refs: Iterable[EmbedReference],
    *,
    enabled: bool,
    post_id: str | None = None,
) -> list[str]:
    """
    Map embeds to the original URLs of the hosted content.

    Returns an empty list when link saving is disabled, without looking at the
    providers at all.
    """
    if not enabled:
        return []
    return [resolve_embed_link(ref, post_id=post_id) for ref in refs]
