"""Categorisation and deterministic ordering of files to deploy."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, List, Optional, Sequence


class Category(str, Enum):
    """Categorisation used for ordering and batching."""

    PRIMARY = "primary"
    POM = "pom file"
    SIGNATURE = "signature"
    MAVEN_METADATA = "maven metadata"
    ADDITIONAL = "additional"

    @property
    def priority(self) -> int:
        return CATEGORY_PRIORITY[self]

    @classmethod
    def ordered(cls) -> List["Category"]:
        return sorted(cls, key=lambda category: category.priority)


CATEGORY_PRIORITY: Dict[Category, int] = {
    Category.PRIMARY: 0,
    Category.POM: 1,
    Category.SIGNATURE: 2,
    Category.MAVEN_METADATA: 3,
    Category.ADDITIONAL: 4,
}


class FileSet:
    """An ordered set of files, ready to be deployed.

    Files are sorted by parent directory, category, extension and name so that
    a sequential upload matches the conventional ``jar, pom, metadata, extras``
    order. Instances are built through :meth:`of`.
    """

    def __init__(self, roots: Dict[Path, str], files: Sequence[Path]) -> None:
        self._roots = roots
        self._files = tuple(files)

    @classmethod
    def of(cls, files: Iterable[Path]) -> "FileSet":
        files = [Path(file) for file in files]
        roots = _find_roots(files)
        ordered = sorted(
            files,
            key=lambda file: (
                str(file.parent),
                get_category(roots, file).priority,
                file_extension(file.name),
                name_without_extension(file.name),
            ),
        )
        return cls(roots, ordered)

    def filter(self, predicate: Callable[[Path], bool]) -> "FileSet":
        return FileSet(self._roots, [file for file in self._files if predicate(file)])

    def category(self, file: Path) -> Category:
        return get_category(self._roots, file)

    def batched_by_category(self) -> Dict[Category, List[Path]]:
        """Return the files grouped by category; each batch may be uploaded in parallel."""
        batched: Dict[Category, List[Path]] = {category: [] for category in Category.ordered()}
        for file in self._files:
            batched[get_category(self._roots, file)].append(file)
        return {category: items for category, items in batched.items() if items}

    def __iter__(self) -> Iterator[Path]:
        return iter(self._files)

    def __len__(self) -> int:
        return len(self._files)


def get_category(roots: Dict[Path, str], file: Path) -> Category:
    name = file.name
    if name.endswith(".pom"):
        return Category.POM
    if name.endswith(".asc"):
        return Category.SIGNATURE
    if is_maven_metadata(name):
        return Category.MAVEN_METADATA
    root = roots.get(file.parent)
    return Category.PRIMARY if name_without_extension(name) == root else Category.ADDITIONAL


def is_maven_metadata(name: str) -> bool:
    lower = name.lower()
    return lower.startswith("maven-metadata.xml") or lower.startswith("maven-metadata-local.xml")


def file_extension(name: str) -> str:
    return name.rpartition(".")[2] if "." in name else ""


def name_without_extension(name: str) -> str:
    return name.rpartition(".")[0] if "." in name else name


def _find_roots(files: Iterable[Path]) -> Dict[Path, str]:
    by_parent: Dict[Path, List[Path]] = {}
    for file in files:
        by_parent.setdefault(file.parent, []).append(file)
    roots: Dict[Path, str] = {}
    for parent, siblings in by_parent.items():
        root = _find_root(sorted(siblings, key=lambda file: file.name))
        if root is not None:
            roots[parent] = root
    return roots


def _find_root(files: Iterable[Path]) -> Optional[str]:
    # shortest candidate name wins, the first one seen on equal length
    root: Optional[str] = None
    for file in files:
        if not _is_root_candidate(file):
            continue
        name = name_without_extension(file.name)
        if name and (root is None or len(name) < len(root)):
            root = name
    return root


def _is_root_candidate(file: Path) -> bool:
    name = file.name
    if is_maven_metadata(name) or name.startswith(".") or file.is_dir() or _is_checksum_name(name):
        return False
    return True


def _is_checksum_name(name: str) -> bool:
    lower = name.lower()
    return lower.endswith(".md5") or lower.endswith("sha1")
