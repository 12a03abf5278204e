from __future__ import annotations

import datetime as dt
import re
from dataclasses import dataclass
from pathlib import PurePosixPath

import yaml

FrontmatterValue = str | list[str]
Frontmatter = dict[str, FrontmatterValue]

_DELIMITER = "---"

_FENCE_RE = re.compile(r"^ {0,3}(`{3,}|~{3,})")
_HASHTAG_RE = re.compile(r"(?<![\w#&/])#\w[\w/-]*")
_WIKILINK_RE = re.compile(r"\[\[([^\[\]|]*)(?:\|[^\[\]]*)?\]\]")


@dataclass(frozen=True)
class FrontmatterParse:
    frontmatter: Frontmatter | None
    body: str
    error: str | None


def _split_frontmatter(markdown: str) -> tuple[str, str] | None:
    """Return (yaml_block, body) when the text opens with a closed `---` block."""
    first_newline = markdown.find("\n")
    if first_newline == -1:
        return None
    if markdown[:first_newline].rstrip("\r") != _DELIMITER:
        return None

    # Find a subsequent line that is exactly `---`
    search_from = first_newline + 1
    while True:
        next_newline = markdown.find("\n", search_from)
        end = next_newline if next_newline != -1 else len(markdown)
        if markdown[search_from:end].rstrip("\r") == _DELIMITER:
            body = markdown[next_newline + 1 :] if next_newline != -1 else ""
            return markdown[first_newline + 1 : search_from], body
        if next_newline == -1:
            return None
        search_from = next_newline + 1


def _coerce_scalar(value: object) -> str | None:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (dt.date, dt.datetime)):
        return value.isoformat()
    return None


def _normalize_frontmatter(raw: dict) -> Frontmatter:
    out: Frontmatter = {}
    for key, value in raw.items():
        if value is None:
            out[str(key)] = ""
            continue
        if isinstance(value, list):
            items = [_coerce_scalar(v) for v in value]
            out[str(key)] = [v for v in items if v is not None]
            continue
        scalar = _coerce_scalar(value)
        if scalar is not None:
            out[str(key)] = scalar
    return out


def parse_frontmatter(markdown: str) -> FrontmatterParse:
    split = _split_frontmatter(markdown)
    if split is None:
        return FrontmatterParse(frontmatter=None, body=markdown, error=None)

    yaml_block, body = split
    try:
        parsed = yaml.safe_load(yaml_block)
    except yaml.YAMLError:
        return FrontmatterParse(frontmatter=None, body=body, error="frontmatter_yaml_error")
    if parsed is None:
        return FrontmatterParse(frontmatter={}, body=body, error=None)
    if not isinstance(parsed, dict):
        return FrontmatterParse(frontmatter=None, body=body, error="frontmatter_not_mapping")
    return FrontmatterParse(frontmatter=_normalize_frontmatter(parsed), body=body, error=None)


def remove_frontmatter(markdown: str) -> str:
    split = _split_frontmatter(markdown)
    if split is None:
        return markdown
    return split[1]


def _closes_fence(line: str, fence: str) -> bool:
    m = _FENCE_RE.match(line)
    if not m:
        return False
    run = m.group(1)
    # A closing fence carries no info string.
    return run[0] == fence[0] and len(run) >= len(fence) and not line[m.end() :].strip()


def exclude_code_blocks(text: str) -> str:
    kept: list[str] = []
    fence: str | None = None
    for line in text.splitlines(keepends=True):
        if fence is not None:
            if _closes_fence(line, fence):
                fence = None
            continue
        m = _FENCE_RE.match(line)
        # A backtick fence's info string cannot hold a backtick (inline code).
        if m and not (m.group(1)[0] == "`" and "`" in line[m.end() :]):
            fence = m.group(1)
            continue
        kept.append(line)
    return "".join(kept)


def extract_hashtags(text: str) -> list[str]:
    return _HASHTAG_RE.findall(text)


def extract_wikilinks(text: str) -> list[str]:
    links: list[str] = []
    for m in _WIKILINK_RE.finditer(text):
        name = m.group(1).strip()
        if name:
            links.append(name)
    return links


def normalize_tag(tag: str) -> str:
    return tag.strip().lstrip("#").strip().lower()


def frontmatter_tags(frontmatter: Frontmatter | None) -> list[str]:
    if not frontmatter:
        return []
    raw = frontmatter.get("tags")
    if isinstance(raw, str):
        values = raw.split(",")
    elif isinstance(raw, list):
        values = raw
    else:
        return []
    return [v.strip().lstrip("#").strip() for v in values if v.strip()]


def unique_tags(tags: list[str]) -> list[str]:
    seen: set[str] = set()
    result: list[str] = []
    for tag in tags:
        normalized = normalize_tag(tag)
        if normalized and normalized not in seen:
            seen.add(normalized)
            result.append(tag)
    return result


def note_tags(markdown: str, frontmatter: Frontmatter | None) -> list[str]:
    """Frontmatter tags first, then inline hashtags of the body, de-duplicated."""
    inline = [t.removeprefix("#").strip() for t in extract_hashtags(remove_frontmatter(markdown))]
    return unique_tags(frontmatter_tags(frontmatter) + inline)


def note_stem(note_path: str) -> str:
    return PurePosixPath(note_path).stem


def link_target_name(link: str) -> str:
    target = re.split(r"[#^]", link, maxsplit=1)[0].strip()
    name = target.rsplit("/", 1)[-1]
    if name.lower().endswith(".md"):
        name = name[:-3]
    return name.strip()
