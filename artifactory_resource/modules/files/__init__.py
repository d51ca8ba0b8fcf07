from .checksum import Checksum, Checksums, digest_all, is_checksum_file
from .fileset import Category, FileSet
from .scanner import DirectoryScanner, PathFilter

__all__ = [
    "Checksum",
    "Checksums",
    "digest_all",
    "is_checksum_file",
    "Category",
    "FileSet",
    "DirectoryScanner",
    "PathFilter",
]
