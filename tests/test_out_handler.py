import json
from datetime import datetime, timezone

import httpx
import pytest

from artifactory_resource.exceptions import InvalidRequestError, MalformedPathError
from artifactory_resource.modules.artifactory import ArtifactoryServer
from artifactory_resource.modules.command import (
    BuildNumberGenerator,
    OutHandler,
    OutRequest,
    strip_snapshot_timestamp,
)

BASE_URL = "https://repo.example.com/artifactory"
SNAPSHOT_FOLDER = "com/example/foo/1.0.0-SNAPSHOT"


class FakeArtifactory:
    def __init__(self):
        self.deployed = []
        self.build_info = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == "/artifactory/api/build":
            self.build_info = json.loads(request.content)
            return httpx.Response(204)
        self.deployed.append(request)
        return httpx.Response(201)

    @property
    def deployed_paths(self):
        return [request.url.raw_path.decode() for request in self.deployed]


class FakeSigner:
    def sign(self, content: bytes) -> bytes:
        return b"signature"


def build_handler(fake, **kwargs):
    client = httpx.Client(transport=httpx.MockTransport(fake))
    return OutHandler(lambda source: ArtifactoryServer(source.uri, client=client), **kwargs)


def build_request(source=None, **params):
    return OutRequest.from_payload(
        {
            "source": dict({"uri": BASE_URL, "build_name": "my-build"}, **(source or {})),
            "params": dict({"repo": "libs-snapshot-local", "folder": "dist", "build_number": "1234"}, **params),
        }
    )


def write_files(tmp_path, *names, folder=SNAPSHOT_FOLDER):
    directory = tmp_path / "dist" / folder
    directory.mkdir(parents=True, exist_ok=True)
    for name in names:
        (directory / name).write_bytes(b"content of " + name.encode())
    return tmp_path


def test_deploys_artifacts_in_order_and_adds_build(tmp_path):
    write_files(tmp_path, "foo-1.0.0-SNAPSHOT.pom", "foo-1.0.0-SNAPSHOT-sources.jar", "foo-1.0.0-SNAPSHOT.jar")
    fake = FakeArtifactory()

    response = build_handler(fake).handle(build_request(build_uri="https://ci.example.com/1234"), tmp_path)

    assert response.as_dict() == {"version": {"build_number": "1234"}}
    matrix = ";build.name=my-build;build.number=1234"
    assert fake.deployed_paths == [
        f"/artifactory/libs-snapshot-local/{SNAPSHOT_FOLDER}/foo-1.0.0-SNAPSHOT.jar{matrix}",
        f"/artifactory/libs-snapshot-local/{SNAPSHOT_FOLDER}/foo-1.0.0-SNAPSHOT.pom{matrix}",
        f"/artifactory/libs-snapshot-local/{SNAPSHOT_FOLDER}/foo-1.0.0-SNAPSHOT-sources.jar{matrix}",
    ]
    assert fake.deployed[0].content == b"content of foo-1.0.0-SNAPSHOT.jar"
    build_info = fake.build_info
    assert build_info["name"] == "my-build"
    assert build_info["number"] == "1234"
    assert build_info["url"] == "https://ci.example.com/1234"
    assert build_info["agent"] == {"name": "Concourse", "version": None}
    module = build_info["modules"][0]
    assert module["id"] == "com.example:foo:1.0.0-SNAPSHOT"
    assert [(item["type"], item["name"]) for item in module["artifacts"]] == [
        ("jar", "foo-1.0.0-SNAPSHOT.jar"),
        ("pom", "foo-1.0.0-SNAPSHOT.pom"),
        ("java-source-jar", "foo-1.0.0-SNAPSHOT-sources.jar"),
    ]


def test_skips_checksum_and_metadata_files(tmp_path):
    write_files(tmp_path, "foo-1.0.0-SNAPSHOT.jar", "foo-1.0.0-SNAPSHOT.jar.md5", "foo-1.0.0-SNAPSHOT.jar.sha1")
    write_files(tmp_path, "maven-metadata.xml", folder="com/example/foo")
    fake = FakeArtifactory()

    build_handler(fake).handle(build_request(), tmp_path)

    assert [path.rpartition("/")[2].split(";")[0] for path in fake.deployed_paths] == ["foo-1.0.0-SNAPSHOT.jar"]


def test_keeps_metadata_when_not_stripping(tmp_path):
    write_files(tmp_path, "foo-1.0.0-SNAPSHOT.jar")
    write_files(tmp_path, "maven-metadata.xml", folder="com/example/foo")
    fake = FakeArtifactory()

    build_handler(fake).handle(build_request(strip_snapshot_timestamps=False), tmp_path)

    assert len(fake.deployed) == 2
    assert "maven-metadata.xml" in fake.deployed_paths[1]


def test_strips_snapshot_timestamps(tmp_path):
    write_files(tmp_path, "foo-1.0.0-20171005.194031-1.jar")
    fake = FakeArtifactory()

    build_handler(fake).handle(build_request(), tmp_path)

    assert fake.deployed_paths[0].startswith(f"/artifactory/libs-snapshot-local/{SNAPSHOT_FOLDER}/foo-1.0.0-SNAPSHOT.jar;")


def test_keeps_timestamps_when_requested(tmp_path):
    write_files(tmp_path, "foo-1.0.0-20171005.194031-1.jar")
    fake = FakeArtifactory()

    build_handler(fake).handle(build_request(strip_snapshot_timestamps=False), tmp_path)

    assert "foo-1.0.0-20171005.194031-1.jar;" in fake.deployed_paths[0]


def test_adds_artifact_set_properties(tmp_path):
    write_files(tmp_path, "foo-1.0.0-SNAPSHOT.jar", "foo-1.0.0-SNAPSHOT.pom")
    fake = FakeArtifactory()
    artifact_set = [{"include": ["**/*.pom"], "properties": {"kind": "pom"}}]

    build_handler(fake).handle(build_request(artifact_set=artifact_set), tmp_path)

    jar, pom = fake.deployed_paths
    assert jar.endswith("foo-1.0.0-SNAPSHOT.jar;build.name=my-build;build.number=1234")
    assert pom.endswith("foo-1.0.0-SNAPSHOT.pom;kind=pom;build.name=my-build;build.number=1234")


def test_applies_include_and_exclude(tmp_path):
    write_files(tmp_path, "foo-1.0.0-SNAPSHOT.jar", "foo-1.0.0-SNAPSHOT.pom", "foo-1.0.0-SNAPSHOT.zip")
    fake = FakeArtifactory()

    build_handler(fake).handle(build_request(include=["**/*.jar", "**/*.zip"], exclude=["**/*.zip"]), tmp_path)

    assert len(fake.deployed) == 1
    assert ".jar;" in fake.deployed_paths[0]


def test_generates_build_number(tmp_path):
    write_files(tmp_path, "foo-1.0.0-SNAPSHOT.jar")
    fake = FakeArtifactory()
    clock = lambda: datetime(2017, 10, 5, 19, 40, 31, 123456, tzinfo=timezone.utc)  # noqa: E731
    request = build_request()
    request.params.build_number = None

    response = build_handler(fake, build_number_generator=BuildNumberGenerator(clock)).handle(request, tmp_path)

    assert response.version.build_number == "20171005194031123456000"
    assert fake.build_info["number"] == "20171005194031123456000"


def test_generated_build_number_uses_source_prefix(tmp_path):
    write_files(tmp_path, "foo-1.0.0-SNAPSHOT.jar")
    fake = FakeArtifactory()
    clock = lambda: datetime(2017, 10, 5, 19, 40, 31, 123456, tzinfo=timezone.utc)  # noqa: E731
    request = build_request(source={"build_number_prefix": "main-"})
    request.params.build_number = None

    response = build_handler(fake, build_number_generator=BuildNumberGenerator(clock)).handle(request, tmp_path)

    assert response.version.build_number == "main-20171005194031123456000"
    assert fake.deployed_paths[0].endswith(";build.number=main-20171005194031123456000")


def test_given_build_number_is_not_prefixed(tmp_path):
    write_files(tmp_path, "foo-1.0.0-SNAPSHOT.jar")
    fake = FakeArtifactory()

    response = build_handler(fake).handle(build_request(source={"build_number_prefix": "main-"}), tmp_path)

    assert response.version.build_number == "1234"


def test_signs_artifacts(tmp_path):
    write_files(tmp_path, "foo-1.0.0-SNAPSHOT.jar", "foo-1.0.0-SNAPSHOT.pom")
    fake = FakeArtifactory()

    build_handler(fake, signer=FakeSigner()).handle(build_request(sign=True), tmp_path)

    names = [path.rpartition("/")[2].split(";")[0] for path in fake.deployed_paths]
    assert names == [
        "foo-1.0.0-SNAPSHOT.jar",
        "foo-1.0.0-SNAPSHOT.pom",
        "foo-1.0.0-SNAPSHOT.jar.asc",
        "foo-1.0.0-SNAPSHOT.pom.asc",
    ]
    assert fake.deployed[2].content == b"signature"


def test_sign_without_signer_is_rejected(tmp_path):
    write_files(tmp_path, "foo-1.0.0-SNAPSHOT.jar")
    fake = FakeArtifactory()

    with pytest.raises(InvalidRequestError):
        build_handler(fake).handle(build_request(sign=True), tmp_path)
    assert fake.deployed == []


def test_empty_folder_is_rejected(tmp_path):
    (tmp_path / "dist").mkdir()

    with pytest.raises(InvalidRequestError):
        build_handler(FakeArtifactory()).handle(build_request(), tmp_path)


def test_strip_snapshot_timestamp():
    timestamped = "/com/example/foo/1.0.0-SNAPSHOT/foo-1.0.0-20171005.194031-1-sources.jar"

    assert strip_snapshot_timestamp(timestamped) == "/com/example/foo/1.0.0-SNAPSHOT/foo-1.0.0-SNAPSHOT-sources.jar"
    assert strip_snapshot_timestamp("/com/example/foo/1.0.0/foo-1.0.0.jar") == "/com/example/foo/1.0.0/foo-1.0.0.jar"


def test_strip_snapshot_timestamp_rejects_name_without_version():
    with pytest.raises(MalformedPathError):
        strip_snapshot_timestamp("/com/example/my/1.0/my-sources.jar")
