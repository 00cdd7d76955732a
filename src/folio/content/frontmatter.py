"""
Strict front matter parsing.

Splits a content file into its YAML front matter block and body, and loads
the block with a loader that records duplicated mapping keys instead of
silently keeping the last one.
"""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from frontmatter.default_handlers import YAMLHandler

_handler = YAMLHandler()


class FrontMatterError(ValueError):
    """Raised when a file's front matter cannot be parsed."""

    def __init__(self, message: str, path: Path | None = None):
        self.path = path
        self.message = message
        location = f"{path}: " if path else ""
        super().__init__(f"{location}{message}")


@dataclass
class DuplicateKey:
    """A mapping key that appears more than once in the same mapping."""

    key: str
    line: int  # 1-based line in the source file
    first_line: int

    def to_dict(self) -> dict[str, Any]:
        return {"key": self.key, "line": self.line, "first_line": self.first_line}


@dataclass
class ParsedFrontMatter:
    """Result of parsing a content file."""

    metadata: dict[str, Any]
    body: str
    duplicates: list[DuplicateKey] = field(default_factory=list)


class UniqueKeyLoader(yaml.SafeLoader):
    """SafeLoader that records duplicate keys in every mapping it builds."""

    def __init__(self, stream):
        super().__init__(stream)
        self.duplicates: list[DuplicateKey] = []

    def construct_mapping(self, node, deep=False):
        if isinstance(node, yaml.MappingNode):
            seen: dict[Any, int] = {}
            for key_node, _value_node in node.value:
                # Merge keys (<<) are expanded by flatten_mapping, not duplicates
                if key_node.tag == "tag:yaml.org,2002:merge":
                    continue
                key = self.construct_object(key_node, deep=deep)
                if not isinstance(key, Hashable):
                    continue
                line = key_node.start_mark.line + 1
                if key in seen:
                    self.duplicates.append(
                        DuplicateKey(key=str(key), line=line, first_line=seen[key])
                    )
                else:
                    seen[key] = line
        return super().construct_mapping(node, deep=deep)


def split_front_matter(text: str) -> tuple[str, str] | None:
    """Split raw file content into (front matter text, body).

    Returns:
        Tuple of YAML text and body, or None if there is no YAML front matter.

    Raises:
        FrontMatterError: If the opening delimiter is never closed
    """
    text = text.lstrip("\ufeff")
    if not _handler.detect(text):
        return None
    try:
        fm_text, body = _handler.split(text)
    except ValueError:
        raise FrontMatterError("Front matter block is not closed with '---'") from None
    return fm_text, body.lstrip("\n")


def load_yaml_strict(fm_text: str) -> tuple[Any, list[DuplicateKey]]:
    """Load a YAML document, collecting duplicate keys.

    Raises:
        yaml.YAMLError: On invalid YAML
    """
    loader = UniqueKeyLoader(fm_text)
    try:
        data = loader.get_single_data()
    finally:
        loader.dispose()
    return data, loader.duplicates


def parse_front_matter(text: str, path: Path | None = None) -> ParsedFrontMatter:
    """Parse a content file's front matter and body.

    Args:
        text: Raw file content
        path: Optional file path for error messages

    Returns:
        ParsedFrontMatter with metadata, body and any duplicate keys

    Raises:
        FrontMatterError: If there is no front matter, it is unsupported,
            malformed, or not a key-value mapping
    """
    stripped = text.lstrip("\ufeff")
    if stripped.startswith("+++"):
        raise FrontMatterError("TOML front matter (+++) is not supported", path)

    try:
        split = split_front_matter(stripped)
    except FrontMatterError as e:
        raise FrontMatterError(e.message, path) from None

    if split is None:
        raise FrontMatterError("No front matter block", path)

    fm_text, body = split
    try:
        data, duplicates = load_yaml_strict(fm_text)
    except yaml.YAMLError as e:
        raise FrontMatterError(f"Invalid YAML: {e}", path) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise FrontMatterError(
            f"Front matter must be a key-value mapping, got {type(data).__name__}",
            path,
        )

    return ParsedFrontMatter(metadata=data, body=body, duplicates=duplicates)


def has_front_matter(text: str) -> bool:
    """Check whether text starts with a front matter delimiter."""
    stripped = text.lstrip("\ufeff")
    return stripped.startswith("+++") or _handler.detect(stripped)
