"""Streaming checksum calculation and validation."""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO, Dict, Iterator

from artifactory_resource.exceptions import InvalidChecksumError

CHUNK_SIZE = 64 * 1024


class Checksum(Enum):
    """Supported checksum algorithms with their hex digest length."""

    MD5 = ("md5", 32)
    SHA1 = ("sha1", 40)

    def __init__(self, algorithm: str, length: int) -> None:
        self.algorithm = algorithm
        self.length = length

    @property
    def file_extension(self) -> str:
        return "." + self.name.lower()

    def validate(self, value: str | None) -> None:
        if not value:
            raise InvalidChecksumError(f"{self.name} must not be empty")
        if len(value) != self.length:
            raise InvalidChecksumError(f"{self.name} must be {self.length} characters long")

    @classmethod
    def file_extensions(cls) -> Iterator[str]:
        return (checksum.file_extension for checksum in cls)


def is_checksum_file(path: str) -> bool:
    lower = path.lower()
    return any(lower.endswith(extension) for extension in Checksum.file_extensions())


def digest_all(content: BinaryIO) -> Dict[Checksum, str]:
    """Read ``content`` once, feeding every chunk to all digests."""
    digests = {checksum: hashlib.new(checksum.algorithm) for checksum in Checksum}
    for chunk in iter(lambda: content.read(CHUNK_SIZE), b""):
        for digest in digests.values():
            digest.update(chunk)
    return {checksum: digest.hexdigest() for checksum, digest in digests.items()}


@dataclass(frozen=True)
class Checksums:
    sha1: str
    md5: str

    def __post_init__(self) -> None:
        Checksum.SHA1.validate(self.sha1)
        Checksum.MD5.validate(self.md5)

    @classmethod
    def calculate(cls, content: BinaryIO) -> "Checksums":
        digests = digest_all(content)
        return cls(sha1=digests[Checksum.SHA1], md5=digests[Checksum.MD5])
