"""Path dialects — separator conventions per storage category.

Local disks, object stores and block/hybrid mounts use POSIX-style ``/``
paths. Network shares may arrive as UNC (``\\\\server\\share\\dir``),
``//server/share/dir`` or mounted ``/Volumes/Share/dir`` paths. The root of
every source is the empty string.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from tierfinder.schemas.sources import SourceCategory

ROOT = ""

_ANY_SEPARATOR = re.compile(r"[\\/]")


def basename(path: str) -> str:
    """Last non-empty segment, splitting on either separator."""
    parts = [p for p in _ANY_SEPARATOR.split(path) if p]
    return parts[-1] if parts else ""


@dataclass(frozen=True)
class ParsedPath:
    prefix: str
    separator: str
    parts: tuple[str, ...]

    def format(self) -> str:
        if not self.parts:
            return ROOT
        return self.prefix + self.separator.join(self.parts)

    def with_parts(self, parts: tuple[str, ...]) -> ParsedPath:
        return ParsedPath(self.prefix, self.separator, parts)


class PathDialect:
    """Parent/join/descendant logic for one path convention."""

    name = "abstract"

    def parse(self, path: str) -> ParsedPath:
        raise NotImplementedError

    def normalize(self, path: str) -> str:
        return self.parse(path).format()

    def is_root(self, path: str) -> bool:
        return not self.parse(path).parts

    def segments(self, path: str) -> list[str]:
        return list(self.parse(path).parts)

    def parent(self, path: str) -> str:
        parsed = self.parse(path)
        if not parsed.parts:
            return ROOT
        return parsed.with_parts(parsed.parts[:-1]).format()

    def join(self, directory: str, name: str) -> str:
        """Child path of ``directory``; ``''`` and ``'/'`` are the same root."""
        parsed = self.parse(directory)
        if not parsed.parts:
            return "/" + name
        return parsed.with_parts(parsed.parts + (name,)).format()

    def basename(self, path: str) -> str:
        parts = self.parse(path).parts
        return parts[-1] if parts else ""

    def is_same_or_descendant(self, path: str, ancestor: str) -> bool:
        """True if ``path`` is ``ancestor`` itself or lies inside it."""
        candidate = self.parse(path).parts
        base = self.parse(ancestor).parts
        return candidate[: len(base)] == base

    def breadcrumbs(self, path: str) -> list[tuple[str, str]]:
        """(name, path) pairs from the first segment down to ``path``."""
        parsed = self.parse(path)
        return [
            (part, parsed.with_parts(parsed.parts[: i + 1]).format())
            for i, part in enumerate(parsed.parts)
        ]


class PosixDialect(PathDialect):
    name = "posix"

    def parse(self, path: str) -> ParsedPath:
        # Every non-root path is absolute: "docs" and "/docs" name the same folder
        parts = tuple(p for p in path.split("/") if p)
        return ParsedPath("/", "/", parts)


class UncDialect(PathDialect):
    """Backslash-aware dialect for SMB/NFS shares."""

    name = "unc"

    def parse(self, path: str) -> ParsedPath:
        if path.startswith("\\\\"):
            prefix, separator = "\\\\", "\\"
        elif path.startswith("//"):
            prefix, separator = "//", "/"
        elif "\\" in path and "/" not in path:
            prefix, separator = "", "\\"
        else:
            prefix, separator = "/", "/"
        parts = tuple(p for p in _ANY_SEPARATOR.split(path) if p)
        return ParsedPath(prefix, separator, parts)


POSIX = PosixDialect()
UNC = UncDialect()


def dialect_for(category: SourceCategory | None) -> PathDialect:
    """Pick the path dialect for a storage category."""
    if category == SourceCategory.NETWORK:
        return UNC
    return POSIX
