from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from notelens_api.parsing import Frontmatter


class InputKind(str, Enum):
    PATH = "path"
    TAG = "tag"
    FIND = "find"


@dataclass(frozen=True)
class SelectionInput:
    kind: InputKind
    value: str


@dataclass(frozen=True)
class InfoOptions:
    include_tags: bool = False
    include_links: bool = False


@dataclass(frozen=True)
class FileAttributes:
    size: int
    modified: datetime


@dataclass(frozen=True)
class NoteInfo:
    path: str
    absolute_path: str
    size: int
    size_human: str
    modified: str
    modified_human: str
    title: str
    word_count: int
    reading_time_minutes: float
    frontmatter: Frontmatter | None = None
    tags: list[str] | None = None
    links: list[str] | None = None
    backlinks: list[str] | None = None

    def to_dict(self) -> dict:
        """Plain dict with unset optional fields left out."""
        out = {
            "path": self.path,
            "absolute_path": self.absolute_path,
            "size": self.size,
            "size_human": self.size_human,
            "modified": self.modified,
            "modified_human": self.modified_human,
            "title": self.title,
            "word_count": self.word_count,
            "reading_time_minutes": self.reading_time_minutes,
        }
        for key in ("frontmatter", "tags", "links", "backlinks"):
            value = getattr(self, key)
            if value is not None:
                out[key] = value
        return out
