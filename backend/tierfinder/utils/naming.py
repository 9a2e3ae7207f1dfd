"""Name generation and validation for duplicate, new-folder and rename."""

from __future__ import annotations

import re
from collections.abc import Iterable

UNTITLED_FOLDER = "untitled folder"
FORBIDDEN_CHARACTERS = ("/", "\\")


class InvalidNameError(ValueError):
    """A user-supplied file name was rejected before reaching the backend."""


def split_extension(name: str) -> tuple[str, str]:
    """Split at the last '.'; a leading dot (".bashrc") is not an extension."""
    idx = name.rfind(".")
    if idx <= 0:
        return name, ""
    return name[:idx], name[idx:]


def duplicate_name(name: str, existing: Iterable[str]) -> str:
    """Next free "<base> copy<ext>" / "<base> copy N<ext>" name.

    Existing siblings matching ``<base> copy( N)?<ext>`` are counted; with
    none the result is ``<base> copy<ext>``, otherwise ``<base> copy N+1<ext>``.
    """
    base, ext = split_extension(name)
    pattern = re.compile(rf"^{re.escape(base)} copy( \d+)?{re.escape(ext)}$")
    taken = set(existing)
    copies = sum(1 for sibling in taken if pattern.match(sibling))

    if copies == 0:
        return f"{base} copy{ext}"

    number = copies + 1
    candidate = f"{base} copy {number}{ext}"
    while candidate in taken:
        number += 1
        candidate = f"{base} copy {number}{ext}"
    return candidate


def untitled_folder_name(existing: Iterable[str]) -> str:
    """"untitled folder", then "untitled folder 2", ... (case-insensitive)."""
    taken = {n.lower() for n in existing}
    candidate = UNTITLED_FOLDER
    counter = 1
    while candidate.lower() in taken:
        counter += 1
        candidate = f"{UNTITLED_FOLDER} {counter}"
    return candidate


def validate_name(name: str) -> str:
    """Return the trimmed name or raise InvalidNameError."""
    cleaned = name.strip()
    if not cleaned:
        raise InvalidNameError("File names cannot be empty")
    if any(ch in cleaned for ch in FORBIDDEN_CHARACTERS):
        raise InvalidNameError("File names cannot contain slashes")
    if cleaned in (".", ".."):
        raise InvalidNameError(f"'{cleaned}' is not a valid file name")
    return cleaned
