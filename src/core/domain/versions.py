"""Version string helpers.

Versions are opaque dot-separated tokens ("114.0.5735.90"). They are never
parsed into structured objects, only trimmed and stripped of tag prefixes.
"""

from __future__ import annotations

import re

_TAG_PREFIX = re.compile(r"^v\.?")


def strip_tag_prefix(tag: str) -> str:
    """Drop a leading "v" or "v." from a release tag."""

    return _TAG_PREFIX.sub("", tag.strip())


def nth_token(output: str | None, index: int) -> str | None:
    if not output:
        return None
    tokens = output.split()
    if len(tokens) <= index:
        return None
    return tokens[index]


def first_token(output: str | None) -> str | None:
    """First whitespace-delimited token, e.g. browser `--version` output."""

    return nth_token(output, 0)


def second_token(output: str | None) -> str | None:
    """Second token, e.g. "operadriver 114.0.5735.90 (...)" -> "114.0.5735.90"."""

    return nth_token(output, 1)
