"""Tolerant parser for the metadata header at the top of rule files.

The header is a ``---`` delimited block of ``key: value`` lines. Values may be
quoted strings, ``[a, b]`` inline lists, ``- item`` block lists or booleans.
Lines that cannot be understood are recorded in ``skipped`` and ignored.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Tuple, Union

FieldValue = Union[str, bool, List[str]]

DELIMITER = "---"
QUOTES = frozenset({'"', "'"})

_KEY_RE = re.compile(r"^([A-Za-z_][\w-]*)\s*:\s*(.*)$")
_ITEM_RE = re.compile(r"^\s*-\s+(.*)$")
_ESCAPE_RE = re.compile(r'\\(["\\])')


@dataclass
class Frontmatter:
    """Parsed header fields plus the body that follows the block."""

    fields: Dict[str, FieldValue] = field(default_factory=dict)
    body: str = ""
    present: bool = False
    skipped: List[str] = field(default_factory=list)

    def keys(self) -> List[str]:
        return list(self.fields)

    def get_str(self, key: str, default: Optional[str] = None) -> Optional[str]:
        value = self.fields.get(key)
        if value is None:
            return default
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, list):
            return ", ".join(value) if value else default
        return value or default

    def get_list(self, key: str) -> List[str]:
        value = self.fields.get(key)
        if value is None or isinstance(value, bool):
            return []
        if isinstance(value, list):
            return list(value)
        return [part.strip() for part in value.split(",") if part.strip()]

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self.fields.get(key)
        if isinstance(value, bool):
            return value
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in {"true", "yes", "on", "1"}:
                return True
            if lowered in {"false", "no", "off", "0"}:
                return False
        return default


def parse_frontmatter(text: str) -> Frontmatter:
    """Split ``text`` into header fields and body; never raises."""
    lines = text.lstrip("\ufeff").splitlines()
    if not lines or lines[0].strip() != DELIMITER:
        return Frontmatter(body=text)

    closing = None
    for index in range(1, len(lines)):
        if lines[index].strip() == DELIMITER:
            closing = index
            break
    if closing is None:
        return Frontmatter(body=text)

    result = Frontmatter(present=True, body="\n".join(lines[closing + 1 :]).lstrip("\n"))
    pending_list: Optional[str] = None
    for raw in lines[1:closing]:
        stripped = raw.strip()
        if not stripped or stripped.startswith("#"):
            continue
        item = _ITEM_RE.match(raw)
        if item and pending_list is not None:
            value = result.fields.setdefault(pending_list, [])
            if isinstance(value, list):
                value.append(_unquote(item.group(1).strip()))
            continue
        match = _KEY_RE.match(stripped)
        if not match:
            result.skipped.append(raw)
            pending_list = None
            continue
        key, value_part = match.group(1), match.group(2).strip()
        if not value_part:
            result.fields[key] = []
            pending_list = key
            continue
        pending_list = None
        result.fields[key] = _parse_value(value_part)
    return result


def render_frontmatter(fields: Mapping[str, FieldValue]) -> str:
    """Render fields as a header block in the same dialect the parser reads."""
    lines = [DELIMITER]
    for key, value in fields.items():
        if isinstance(value, bool):
            rendered = "true" if value else "false"
        elif isinstance(value, list):
            rendered = "[" + ", ".join(_quote_item(item) for item in value) + "]"
        else:
            rendered = _quote_if_needed(str(value))
        lines.append(f"{key}: {rendered}")
    lines.append(DELIMITER)
    return "\n".join(lines) + "\n"


def split_frontmatter(text: str) -> Tuple[str, str]:
    """Return the raw header block (delimiters included) and the remaining body."""
    lines = text.lstrip("\ufeff").splitlines()
    if not lines or lines[0].strip() != DELIMITER:
        return "", text
    for index in range(1, len(lines)):
        if lines[index].strip() == DELIMITER:
            header = "\n".join(lines[: index + 1]) + "\n"
            return header, "\n".join(lines[index + 1 :]).lstrip("\n")
    return "", text


def _parse_value(value: str) -> FieldValue:
    if value.startswith("[") and value.endswith("]"):
        return _parse_inline_list(value)
    if len(value) >= 2 and value[0] == value[-1] and value[0] in QUOTES:
        return _unquote(value)
    lowered = value.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    return value


def _parse_inline_list(value: str) -> List[str]:
    inner = value[1:-1].strip()
    if not inner:
        return []
    parts: List[str] = []
    current: List[str] = []
    in_quote: Optional[str] = None
    escaped = False
    for char in inner:
        if in_quote is not None:
            current.append(char)
            if escaped:
                escaped = False
            elif char == "\\" and in_quote == '"':
                escaped = True
            elif char == in_quote:
                in_quote = None
            continue
        # a quote only opens at the start of an item, so "team's" stays one word
        if char in QUOTES and not "".join(current).strip():
            in_quote = char
            current.append(char)
            continue
        if char == ",":
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    parts.append("".join(current).strip())
    return [_unquote(part) for part in parts if part]


def _unquote(value: str) -> str:
    if len(value) < 2 or value[0] != value[-1] or value[0] not in QUOTES:
        return value
    inner = value[1:-1]
    if value[0] == "'":
        return inner.replace("''", "'")
    return _ESCAPE_RE.sub(r"\1", inner)


def _quote(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def _quote_if_needed(value: str) -> str:
    if (
        value != value.strip()
        or value[:1] in QUOTES
        or any(char in value for char in ":#[]")
        or value.lower() in {"true", "false"}
    ):
        return _quote(value)
    return value


def _quote_item(item: str) -> str:
    if not item or item != item.strip() or any(char in item for char in ",:#[]\"'"):
        return _quote(item)
    return item


__all__ = ["Frontmatter", "parse_frontmatter", "render_frontmatter", "split_frontmatter"]
