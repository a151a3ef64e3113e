from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterator, List, Tuple

logger = logging.getLogger(__name__)


class ListFormatError(ValueError):
    """A list file could not be parsed."""

    def __init__(self, path: Path | str, message: str, line: int | None = None) -> None:
        self.path = str(path)
        self.line = line
        where = f"{self.path}:{line}" if line is not None else self.path
        super().__init__(f"{where}: {message}")


@dataclass(frozen=True)
class GSetting:
    schema: str
    key: str
    value: str


def _content_lines(path: Path, *, inline_comments: bool = True) -> Iterator[Tuple[int, str]]:
    """Yield (lineno, text) with comments and blank lines removed."""

    for lineno, raw in enumerate(path.read_text(encoding="utf-8").splitlines(), start=1):
        text = raw.strip()
        if text.startswith("#"):
            continue
        if inline_comments:
            text = text.split("#", 1)[0].strip()
        if text:
            yield lineno, text


def read_name_list(path: Path | str) -> List[str]:
    """Whitespace/newline separated names (pkglist.txt, modules.txt, groups.txt)."""

    p = Path(path)
    names: List[str] = []
    for _, text in _content_lines(p):
        names.extend(text.split())
    logger.debug("Read %d names from %s", len(names), p)
    return names


def read_line_list(path: Path | str) -> List[str]:
    """Exactly one item per line (flatpak-apps.txt)."""

    p = Path(path)
    items: List[str] = []
    for lineno, text in _content_lines(p):
        tokens = text.split()
        if len(tokens) != 1:
            raise ListFormatError(p, f"expected one id per line, got {len(tokens)} fields", lineno)
        items.append(tokens[0])
    return items


def read_npm_manifest(path: Path | str) -> List[str]:
    """Package names from a flat {"name": "version"} JSON object."""

    p = Path(path)
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ListFormatError(p, f"invalid JSON ({e.msg})", e.lineno) from e

    if not isinstance(data, dict):
        raise ListFormatError(p, f"expected a JSON object, got {type(data).__name__}")

    for name, constraint in data.items():
        if not isinstance(constraint, str):
            raise ListFormatError(
                p,
                f"version constraint for {name!r} must be a string, got {type(constraint).__name__}",
            )
        if not name.strip():
            raise ListFormatError(p, "empty package name")
    return list(data.keys())


def read_gsettings(path: Path | str) -> List[GSetting]:
    """Lines of `schema key value`; the value is the rest of the line."""

    p = Path(path)
    entries: List[GSetting] = []
    # No inline comments: values such as colours start with "#".
    for lineno, text in _content_lines(p, inline_comments=False):
        parts = text.split(None, 2)
        if len(parts) < 3:
            raise ListFormatError(p, f"expected 'schema key value', got {text!r}", lineno)
        schema, key, value = parts
        entries.append(GSetting(schema=schema, key=key, value=value.strip()))
    return entries
