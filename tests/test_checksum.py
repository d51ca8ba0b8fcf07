import hashlib
import io

import pytest

from artifactory_resource.exceptions import InvalidChecksumError
from artifactory_resource.modules.files import Checksum, Checksums, digest_all, is_checksum_file


def test_digest_all_returns_lower_case_hex():
    digests = digest_all(io.BytesIO(b"abc"))

    assert digests[Checksum.SHA1] == "a9993e364706816aba3e25717850c26c9cd0d89d"
    assert digests[Checksum.MD5] == "900150983cd24fb0d6963f7d28e17f72"


def test_digest_all_streams_large_content():
    content = bytes(range(256)) * 1024

    checksums = Checksums.calculate(io.BytesIO(content))

    assert checksums.sha1 == hashlib.sha1(content).hexdigest()
    assert checksums.md5 == hashlib.md5(content).hexdigest()


@pytest.mark.parametrize(
    "sha1, md5",
    [
        ("", "900150983cd24fb0d6963f7d28e17f72"),
        ("a9993e364706816aba3e25717850c26c9cd0d89d", None),
        ("a9993e", "900150983cd24fb0d6963f7d28e17f72"),
        ("a9993e364706816aba3e25717850c26c9cd0d89d", "9001509"),
    ],
)
def test_checksums_validate_shape(sha1, md5):
    with pytest.raises(InvalidChecksumError):
        Checksums(sha1=sha1, md5=md5)


def test_checksum_file_detection():
    assert is_checksum_file("/com/example/foo.jar.md5")
    assert is_checksum_file("/com/example/foo.jar.SHA1")
    assert not is_checksum_file("/com/example/foo.jar")
    assert list(Checksum.file_extensions()) == [".md5", ".sha1"]
