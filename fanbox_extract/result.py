from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .naming import create_file_id


@dataclass(frozen=True)
class FileCandidate:
    """A downloadable file discovered in a post. Index 0 belongs to the cover."""

    file_id: str
    name: str
    ext: str
    size: int | None
    index: int
    url: str
    retry_url: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "fileId": self.file_id,
            "name": self.name,
            "ext": self.ext,
            "size": self.size,
            "index": self.index,
            "url": self.url,
            "retryUrl": self.retry_url,
        }


@dataclass
class LinkBundle:
    """
    Links and text gathered from a post, later written out as one ``.txt`` file.

    ``file_id`` stays empty until the first entry is appended.
    """

    name: str
    file_id: str = ""
    text: list[str] = field(default_factory=list)
    ext: str = "txt"

    def extend(self, entries: list[str]) -> None:
        if not entries:
            return
        self.text.extend(entries)
        if not self.file_id:
            self.file_id = create_file_id()

    def append(self, entry: str) -> None:
        self.extend([entry])

    def to_dict(self) -> dict[str, Any]:
        return {
            "fileId": self.file_id,
            "name": self.name,
            "ext": self.ext,
            "size": None,
            "index": 0,
            "text": list(self.text),
            "url": "",
            "retryUrl": None,
        }


@dataclass
class ExtractionResult:
    post_id: str
    type: str
    title: str
    date: str
    fee: int
    user: str
    uid: str
    create_id: str
    tags: str
    links: LinkBundle
    files: list[FileCandidate] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "postId": self.post_id,
            "type": self.type,
            "title": self.title,
            "date": self.date,
            "fee": self.fee,
            "user": self.user,
            "uid": self.uid,
            "createID": self.create_id,
            "tags": self.tags,
            "files": [f.to_dict() for f in self.files],
            "links": self.links.to_dict(),
        }
