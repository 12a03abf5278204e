from __future__ import annotations

import logging
from pathlib import Path, PurePosixPath

from notelens_api.domain.entities import InfoOptions, NoteInfo
from notelens_api.domain.exceptions import NoteNotFoundError, NoteReadError, VaultEnumerationError
from notelens_api.domain.ports import FileAttributeProvider, NoteAccess
from notelens_api.parsing import (
    Frontmatter,
    exclude_code_blocks,
    extract_wikilinks,
    link_target_name,
    note_stem,
    note_tags,
    parse_frontmatter,
    remove_frontmatter,
)
from notelens_api.util import human_time, rfc3339

logger = logging.getLogger("notelens.info")

WORDS_PER_MINUTE = 200.0

_SIZE_UNITS = "KMGTPE"


def humanize_size(size: int) -> str:
    unit = 1024
    if size < unit:
        return f"{size} B"
    div, exp = unit, 0
    n = size // unit
    while n >= unit and exp < len(_SIZE_UNITS) - 1:
        div *= unit
        exp += 1
        n //= unit
    return f"{size / div:.1f} {_SIZE_UNITS[exp]}B"


def count_words(markdown: str) -> int:
    text = exclude_code_blocks(remove_frontmatter(markdown))
    return len(text.split())


def reading_time(word_count: int) -> float:
    """Minutes at 200 words per minute, rounded with Python's round() to one decimal."""
    return round(word_count / WORDS_PER_MINUTE, 1)


def resolve_title(frontmatter: Frontmatter | None, note_path: str) -> str:
    if frontmatter:
        title = frontmatter.get("title")
        if isinstance(title, str) and title.strip():
            return title.strip()
    return note_stem(note_path)


def find_backlinks(notes: NoteAccess, vault_path: str, note_path: str, *, verbose: bool = False) -> list[str]:
    """Every other note holding a wikilink whose target name is this note's stem.

    Scans the vault as it is at call time; notes that cannot be read are
    skipped, notes added after enumeration are not seen.
    """
    try:
        all_paths = notes.list_note_paths(vault_path)
    except OSError as e:
        raise VaultEnumerationError(f"vault_scan_failed: {vault_path}") from e

    wanted = note_stem(note_path).casefold()
    seen: set[str] = {note_path}
    backlinks: list[str] = []
    for other in all_paths:
        if other in seen:
            continue
        seen.add(other)
        try:
            content = notes.read_note_content(vault_path, other)
        except (NoteReadError, OSError) as e:
            if verbose:
                logger.warning("note_read_skipped", extra={"path": other, "error": str(e)})
            continue
        if any(link_target_name(link).casefold() == wanted for link in extract_wikilinks(content)):
            backlinks.append(other)
    return backlinks


def get_note_info(
    notes: NoteAccess,
    attributes: FileAttributeProvider,
    note_path: str,
    vault_path: str,
    options: InfoOptions = InfoOptions(),
    *,
    verbose: bool = False,
) -> NoteInfo:
    absolute_path = str(Path(vault_path) / PurePosixPath(note_path))
    try:
        attrs = attributes.get_file_attributes(absolute_path)
    except (NoteNotFoundError, OSError) as e:
        raise NoteNotFoundError(f"file_not_found: {note_path}") from e

    try:
        content = notes.read_note_content(vault_path, note_path)
    except NoteReadError:
        raise
    except OSError as e:
        raise NoteReadError(f"cannot_read_note: {note_path}") from e

    fm = parse_frontmatter(content)
    if fm.error and verbose:
        logger.warning("frontmatter_parse_error", extra={"path": note_path, "error": fm.error})

    word_count = count_words(content)
    tags = note_tags(content, fm.frontmatter) if options.include_tags else None

    links = backlinks = None
    if options.include_links:
        links = extract_wikilinks(content)
        backlinks = find_backlinks(notes, vault_path, note_path, verbose=verbose)

    return NoteInfo(
        path=note_path,
        absolute_path=absolute_path,
        size=attrs.size,
        size_human=humanize_size(attrs.size),
        modified=rfc3339(attrs.modified),
        modified_human=human_time(attrs.modified),
        title=resolve_title(fm.frontmatter, note_path),
        word_count=word_count,
        reading_time_minutes=reading_time(word_count),
        frontmatter=fm.frontmatter,
        tags=tags,
        links=links,
        backlinks=backlinks,
    )
