"""``$name`` interpolation over already-resolved settings."""
from __future__ import annotations

import re
from collections.abc import Mapping

TOKEN_PATTERN = re.compile(r"\$([A-Za-z0-9_]+)")


def find_references(value: str) -> list[str]:
    """Return setting names referenced by *value*, in order of appearance."""
    return TOKEN_PATTERN.findall(value)


def interpolate(value: str, known: Mapping[str, object]) -> tuple[str, list[str]]:
    """Substitute ``$name`` tokens in *value* using *known* settings.

    A value is either fully substituted or returned verbatim. Every token that
    cannot be resolved (missing, or ``None``) contributes one error message
    naming the token and the original text. Substituted text is not scanned
    again.
    """
    errors: list[str] = []
    pieces: list[str] = []
    position = 0

    for match in TOKEN_PATTERN.finditer(value):
        replacement = known.get(match.group(1))
        if replacement is None:
            errors.append(f"Could not resolve {match.group(0)} in {value}")
            continue
        pieces.append(value[position : match.start()])
        pieces.append(str(replacement))
        position = match.end()

    if errors:
        return value, errors

    pieces.append(value[position:])
    return "".join(pieces), errors


__all__ = ["TOKEN_PATTERN", "find_references", "interpolate"]
