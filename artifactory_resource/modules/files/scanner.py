"""Directory scanning and path filtering with Ant-style patterns."""

from __future__ import annotations

import logging
import re
from functools import lru_cache
from pathlib import Path
from typing import List, Optional, Sequence

log = logging.getLogger(__name__)


@lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern[str]:
    segments = pattern.split("/")
    parts: List[str] = []
    for index, segment in enumerate(segments):
        last = index == len(segments) - 1
        if segment == "**":
            parts.append(".*" if last else "(?:.*/)?")
            continue
        translated = "".join(
            "[^/]*" if char == "*" else "[^/]" if char == "?" else re.escape(char) for char in segment
        )
        parts.append(translated if last else translated + "/")
    return re.compile("".join(parts))


def ant_match(pattern: str, path: str) -> bool:
    """Match ``path`` against an Ant-style pattern (``?``, ``*``, ``**``)."""
    return _compile(pattern).fullmatch(path) is not None


def _has_match(path: str, patterns: Sequence[str]) -> bool:
    return any(ant_match(pattern, path) for pattern in patterns)


class PathFilter:
    """Include/exclude filter for repository paths."""

    def __init__(self, include: Optional[Sequence[str]] = None, exclude: Optional[Sequence[str]] = None) -> None:
        self.include = list(include or [])
        self.exclude = list(exclude or [])

    def is_match(self, path: str) -> bool:
        included = not self.include or self._matches_any(path, self.include)
        return included and not self._matches_any(path, self.exclude)

    def _matches_any(self, path: str, patterns: Sequence[str]) -> bool:
        return any(ant_match(self._clean_pattern(path, pattern), path) for pattern in patterns)

    @staticmethod
    def _clean_pattern(path: str, pattern: str) -> str:
        if path.startswith("/"):
            return pattern if pattern.startswith("/") else "/" + pattern
        return pattern[1:] if pattern.startswith("/") else pattern


class DirectoryScanner:
    """Find the regular files below a directory that match include/exclude patterns."""

    def scan(
        self,
        directory: Path,
        include: Optional[Sequence[str]] = None,
        exclude: Optional[Sequence[str]] = None,
    ) -> List[Path]:
        include = list(include or [])
        exclude = list(exclude or [])
        if not directory.is_dir():
            raise NotADirectoryError(f"'{directory}' is not a directory")
        files = []
        for path in directory.rglob("*"):
            if not path.is_file():
                continue
            relative = path.relative_to(directory).as_posix()
            if (not include or _has_match(relative, include)) and not _has_match(relative, exclude):
                files.append(path)
        files.sort()
        log.debug("Scanned %s found %d files", directory, len(files))
        return files
