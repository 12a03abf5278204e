from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, Field


class NoteListOut(BaseModel):
    items: list[str] = Field(default_factory=list)
    count: int = 0


class NoteInfoOut(BaseModel):
    path: str
    absolute_path: str
    size: int
    size_human: str
    modified: str
    modified_human: str
    title: str
    word_count: int
    reading_time_minutes: float
    frontmatter: Optional[dict[str, Union[str, list[str]]]] = None
    tags: Optional[list[str]] = None
    links: Optional[list[str]] = None
    backlinks: Optional[list[str]] = None
