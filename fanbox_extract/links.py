from __future__ import annotations

import re

from .payload import UrlEmbed

_TEXT_LINK_RE = re.compile(r"https?://[\w=?./&\-#!%]+", re.ASCII)
_HTML_TAG_RE = re.compile(r"<[^<>]+>")
_IFRAME_SRC_RE = re.compile(r'iframe src="(http[^"]*)"')

_DRIVE_FILE_EMBED = "preview?usp=embed_googleplus"
_DRIVE_FOLDER_EMBED = "embeddedfolderview?id="


def extract_text_links(text: str, *, enabled: bool) -> list[str]:
    """
    Find absolute http(s) URLs in free text, in order of appearance.

    Returns an empty list when link saving is disabled.
    """
    if not enabled:
        return []

    links: list[str] = []
    # Lines bound a paragraph that lists several links without separators.
    for line in (text or "").split("\n"):
        links.extend(_TEXT_LINK_RE.findall(line))
    return links


def strip_html_tags(html: str) -> str:
    return _HTML_TAG_RE.sub("", html or "")


def restore_drive_url(url: str) -> str:
    """Turn a Google Drive embed URL back into the link a user would share."""
    if _DRIVE_FILE_EMBED in url:
        url = url.replace(_DRIVE_FILE_EMBED, "edit?usp=drive_link")
    if _DRIVE_FOLDER_EMBED in url:
        url = url.replace(_DRIVE_FOLDER_EMBED, "drive/folders/").replace("#list", "?usp=drive_link")
    return url


def url_embed_link(embed: UrlEmbed) -> str | None:
    """
    Best-effort link for a URL embed.

    ``default`` embeds carry the URL directly. ``html`` and ``html.card`` embeds
    wrap it in an iframe; when no iframe URL is found the raw markup is kept so
    nothing is lost. Other kinds yield None.
    """
    if embed.type == "default":
        return embed.url or None

    if embed.type in ("html", "html.card"):
        markup = embed.html or ""
        match = _IFRAME_SRC_RE.search(markup)
        if match:
            return restore_drive_url(match.group(1))
        return markup or None

    return None
