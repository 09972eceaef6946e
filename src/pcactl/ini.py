"""Tolerant parser for ``puppet.conf`` style INI text.

The parser is deliberately forgiving: anything that is not a section header,
a ``key = value`` line, a comment, or a blank line is dropped rather than
reported. Settings that appear before the first header are collected into the
``main`` section, the same bucket an explicit ``[main]`` header writes into.
"""
from __future__ import annotations

import re

MAIN_SECTION = "main"

SECTION_PATTERN = re.compile(r"^\s*\[\s*([^\]]+?)\s*\]\s*(?:#.*)?$")
SETTING_PATTERN = re.compile(r"^\s*([A-Za-z0-9_]+)\s*=\s*(.*?)\s*$")
# Trailing ``{owner = service, mode = 0640}`` style file metadata.
METADATA_PATTERN = re.compile(r"\s+\{[^{}]*\}$")

RawSection = dict[str, str]
ParsedConfig = dict[str, RawSection]


def parse_text(text: str) -> ParsedConfig:
    """Split *text* into sections of lower-cased key/value pairs."""
    parsed: ParsedConfig = {MAIN_SECTION: {}}
    current = parsed[MAIN_SECTION]

    for line in text.splitlines():
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        header = SECTION_PATTERN.match(line)
        if header:
            current = parsed.setdefault(header.group(1), {})
            continue

        setting = SETTING_PATTERN.match(line)
        if setting:
            key, value = setting.groups()
            current[key.lower()] = _strip_metadata(value)

    return parsed


def _strip_metadata(value: str) -> str:
    return METADATA_PATTERN.sub("", value)


__all__ = ["MAIN_SECTION", "ParsedConfig", "RawSection", "parse_text"]
