from __future__ import annotations

import logging
import os
import stat
from pathlib import Path, PurePosixPath

from notelens_api.domain.entities import FileAttributes
from notelens_api.domain.exceptions import NoteNotFoundError, NoteReadError, PathError, VaultEnumerationError
from notelens_api.util import utc_from_timestamp

logger = logging.getLogger("notelens.vault")


def normalize_note_path(path: str) -> str:
    if "\x00" in path:
        raise PathError("path_contains_nul")

    cleaned = path.strip().replace("\\", "/")
    if not cleaned:
        raise PathError("path_empty")

    p = PurePosixPath(cleaned)
    if p.is_absolute():
        raise PathError("path_absolute_not_allowed")
    if ".." in p.parts:
        raise PathError("path_traversal_not_allowed")

    if p.suffix.lower() != ".md":
        p = p.with_name(p.name + ".md")

    return p.as_posix()


class FileVault:
    """Filesystem-backed note access and file attributes for a vault directory."""

    def _abs_path(self, vault_path: str, note_path: str) -> Path:
        root = Path(vault_path).resolve()
        try:
            abs_path = (root / PurePosixPath(note_path)).resolve()
        except (OSError, RuntimeError) as e:
            raise NoteReadError(f"cannot_resolve_note: {note_path}") from e
        # Symlinks may resolve outside the vault; those notes are unreadable.
        if root not in abs_path.parents:
            raise NoteReadError(f"path_outside_vault: {note_path}")
        return abs_path

    def list_note_paths(self, vault_path: str) -> list[str]:
        root = Path(vault_path)
        if not root.is_dir():
            raise VaultEnumerationError(f"vault_not_found: {vault_path}")
        paths: list[str] = []
        try:
            for p in root.rglob("*.md"):
                rel = p.relative_to(root)
                # Skip hidden files/directories (.obsidian/, .trash/, etc.)
                if any(part.startswith(".") for part in rel.parts):
                    continue
                if p.is_file():
                    paths.append(rel.as_posix())
        except OSError as e:
            raise VaultEnumerationError(f"vault_scan_failed: {vault_path}") from e
        paths.sort()
        logger.debug("vault_scan", extra={"vault": vault_path, "count": len(paths)})
        return paths

    def read_note_content(self, vault_path: str, note_path: str) -> str:
        abs_path = self._abs_path(vault_path, note_path)
        try:
            return abs_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise NoteReadError(f"cannot_read_note: {note_path}") from e

    def get_file_attributes(self, absolute_path: str) -> FileAttributes:
        try:
            st = os.stat(absolute_path)
        except OSError as e:
            raise NoteNotFoundError(absolute_path) from e
        if stat.S_ISDIR(st.st_mode):
            raise NoteNotFoundError(absolute_path)
        return FileAttributes(size=st.st_size, modified=utc_from_timestamp(st.st_mtime))
