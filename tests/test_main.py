import io
import json

import httpx
import pytest

from artifactory_resource.bootstrap import ServiceContainer
from artifactory_resource.exceptions import InvalidRequestError
from artifactory_resource.main import main, run_command
from artifactory_resource.settings import Settings

SOURCE = {"uri": "https://repo.example.com/artifactory", "build_name": "my-build"}


def build_container(handler):
    client = httpx.Client(transport=httpx.MockTransport(handler))
    return ServiceContainer(Settings(_env_file=None), client=client)


def run(container, args, request):
    stdout = io.StringIO()
    run_command(container, args, io.StringIO(json.dumps(request)), stdout)
    return json.loads(stdout.getvalue())


def test_check_writes_versions():
    def handler(request: httpx.Request) -> httpx.Response:
        started = "2014-09-30T12:00:19.893+0000"
        return httpx.Response(200, json={"buildsNumbers": [{"uri": "/12", "started": started}]})

    response = run(build_container(handler), ["check"], {"source": SOURCE})

    assert response == [{"build_number": "12"}]


def test_in_downloads_into_directory(tmp_path):
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/artifactory/api/search/aql":
            item = {"repo": "libs-release-local", "path": "com/example/foo/1.0", "name": "foo-1.0.jar"}
            return httpx.Response(200, json={"results": [item]})
        return httpx.Response(200, content=b"jar")

    request = {"source": SOURCE, "version": {"build_number": "12"}, "params": {"download_checksums": False}}

    response = run(build_container(handler), ["in", str(tmp_path)], request)

    assert response == {"version": {"build_number": "12"}, "metadata": [{"name": "artifacts", "value": "1"}]}
    assert (tmp_path / "com/example/foo/1.0/foo-1.0.jar").read_bytes() == b"jar"


def test_out_deploys_from_directory(tmp_path):
    paths = []

    def handler(request: httpx.Request) -> httpx.Response:
        paths.append(request.url.path)
        return httpx.Response(201)

    folder = tmp_path / "dist/com/example/foo/1.0"
    folder.mkdir(parents=True)
    (folder / "foo-1.0.jar").write_bytes(b"jar")
    request = {"source": SOURCE, "params": {"repo": "libs-release-local", "folder": "dist", "build_number": "12"}}

    response = run(build_container(handler), ["out", str(tmp_path)], request)

    assert response == {"version": {"build_number": "12"}}
    assert paths[-1] == "/artifactory/api/build"


@pytest.mark.parametrize("args", [[], ["deploy"], ["out"], ["in", "/does/not/exist"]])
def test_invalid_arguments_are_rejected(args):
    container = build_container(lambda request: httpx.Response(500))

    with pytest.raises(InvalidRequestError):
        run(container, args, {"source": SOURCE, "version": {"build_number": "12"}})


def test_main_reports_failure_with_exit_code():
    container = build_container(lambda request: httpx.Response(500))

    assert main(["unknown"], container=container) == 1
