from __future__ import annotations

from typing import Protocol, runtime_checkable

from notelens_api.domain.entities import FileAttributes


@runtime_checkable
class NoteAccess(Protocol):
    def list_note_paths(self, vault_path: str) -> list[str]:
        ...

    def read_note_content(self, vault_path: str, note_path: str) -> str:
        ...


@runtime_checkable
class FileAttributeProvider(Protocol):
    def get_file_attributes(self, absolute_path: str) -> FileAttributes:
        ...
