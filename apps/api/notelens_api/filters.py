from __future__ import annotations

import logging
from typing import Callable, Iterable

from notelens_api import fuzzy
from notelens_api.domain.entities import InputKind, SelectionInput
from notelens_api.domain.exceptions import NoteReadError, VaultEnumerationError
from notelens_api.domain.ports import NoteAccess
from notelens_api.parsing import normalize_tag, note_tags, parse_frontmatter

logger = logging.getLogger("notelens.filters")


class _ContentCache:
    """Reads each note at most once for the duration of one listing call."""

    def __init__(self, notes: NoteAccess, vault_path: str, *, verbose: bool) -> None:
        self.notes = notes
        self.vault_path = vault_path
        self.verbose = verbose
        self._contents: dict[str, str | None] = {}
        self._tags: dict[str, set[str]] = {}

    def content(self, note_path: str) -> str | None:
        if note_path not in self._contents:
            try:
                self._contents[note_path] = self.notes.read_note_content(self.vault_path, note_path)
            except (NoteReadError, OSError) as e:
                if self.verbose:
                    logger.warning("note_read_skipped", extra={"path": note_path, "error": str(e)})
                self._contents[note_path] = None
        return self._contents[note_path]

    def tags(self, note_path: str) -> set[str] | None:
        if note_path not in self._tags:
            content = self.content(note_path)
            if content is None:
                return None
            fm = parse_frontmatter(content)
            self._tags[note_path] = {normalize_tag(t) for t in note_tags(content, fm.frontmatter)}
        return self._tags[note_path]


def _matches_input(item: SelectionInput, note_path: str, cache: _ContentCache) -> bool:
    if item.kind is InputKind.PATH:
        return item.value.lower() in note_path.lower()
    if item.kind is InputKind.TAG:
        tags = cache.tags(note_path)
        return tags is not None and normalize_tag(item.value) in tags
    if item.kind is InputKind.FIND:
        return fuzzy.matches(item.value, note_path)
    raise ValueError(f"unknown_input_kind: {item.kind!r}")


def list_files(
    notes: NoteAccess,
    vault_path: str,
    inputs: Iterable[SelectionInput] = (),
    *,
    on_match: Callable[[str], None] | None = None,
    verbose: bool = False,
) -> list[str]:
    """List the notes of a vault that satisfy every selection input.

    Inputs are applied in sequence, each narrowing the candidates left by the
    previous one, so the result is the intersection across inputs in
    enumeration order. No inputs returns the full listing unchanged.

    A note whose content cannot be read never matches a tag input; only a
    failure to enumerate the vault is raised.
    """
    try:
        all_paths = list(notes.list_note_paths(vault_path))
    except OSError as e:
        raise VaultEnumerationError(f"vault_scan_failed: {vault_path}") from e

    cache = _ContentCache(notes, vault_path, verbose=verbose)
    seen: set[str] = set()
    result: list[str] = []
    for note_path in all_paths:
        if note_path not in seen:
            seen.add(note_path)
            result.append(note_path)

    for item in inputs:
        result = [p for p in result if _matches_input(item, p, cache)]
        if not result:
            break

    if on_match is not None:
        for note_path in result:
            on_match(note_path)
    return result
