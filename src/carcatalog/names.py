# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Display-name helpers for directory-derived identities."""

from __future__ import annotations

import re
from typing import Final

_SEPARATOR_RE: Final[re.Pattern[str]] = re.compile(r"[_\-\s]+")
ACRONYM_MAX_LENGTH: Final[int] = 3


def prettify_name(name: str, *, acronyms: bool = True) -> str:
    """Return a human-readable display name for a content identity.

    Separators (underscores, hyphens and whitespace runs) collapse into single
    spaces. Numeric parts are kept verbatim, short parts are treated as
    acronyms and upper-cased when ``acronyms`` is set, and the remaining parts
    get an upper-case first letter.

    Args:
        name: Directory-derived identity such as ``ks_ferrari_488_gt3``.
        acronyms: Whether parts of up to three characters are upper-cased.

    Returns:
        str: Prettified display name, e.g. ``KS Ferrari 488 GT3``.
    """

    words: list[str] = []
    for part in _SEPARATOR_RE.split(name):
        if not part:
            continue
        if part.isdigit():
            words.append(part)
        elif acronyms and len(part) <= ACRONYM_MAX_LENGTH:
            words.append(part.upper())
        else:
            words.append(part[:1].upper() + part[1:])
    return " ".join(words)


__all__ = ["ACRONYM_MAX_LENGTH", "prettify_name"]
