from __future__ import annotations

import time
import uuid
from dataclasses import dataclass
from urllib.parse import urlsplit


@dataclass(frozen=True)
class UrlName:
    name: str
    ext: str


def split_url_name_ext(url: str) -> UrlName:
    """
    Derive a base name and extension from the last path segment of a URL.

    ``https://cdn.example.com/abc.png`` -> ``UrlName(name="abc", ext="png")``.
    The query string and fragment are ignored; a segment without a dot has an
    empty extension.
    """
    value = (url or "").strip()
    try:
        path = urlsplit(value).path
    except ValueError:
        path = value

    file_name = path.rstrip("/").rsplit("/", 1)[-1]
    if "." not in file_name:
        return UrlName(name=file_name, ext="")

    name = file_name.split(".", 1)[0]
    ext = file_name.rsplit(".", 1)[-1]
    return UrlName(name=name, ext=ext)


def create_file_id() -> str:
    """
    Identifier for files the platform does not number itself (covers, link dumps).

    Millisecond timestamp followed by random hex. Two calls in the same
    millisecond only collide if the random suffix does too.
    """
    millis = time.time_ns() // 1_000_000
    return f"{millis}{uuid.uuid4().hex[:12]}"
