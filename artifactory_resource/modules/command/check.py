"""``check``: list new build numbers since a known version."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from artifactory_resource.modules.artifactory import ArtifactoryServer
from artifactory_resource.modules.artifactory.domain import BuildRun

from .payload import CheckRequest, CheckResponse, Source, Version

ServerFactory = Callable[[Source], ArtifactoryServer]


class CheckHandler:
    def __init__(self, server_factory: ServerFactory) -> None:
        self.server_factory = server_factory
        self.log = logging.getLogger(self.__class__.__name__)

    def handle(self, request: CheckRequest) -> CheckResponse:
        source = request.source
        with self.server_factory(source) as server:
            build_runs = server.build_runs(
                source.build_name, project=source.project, limit=source.check_limit, admin=source.admin
            )
            runs = build_runs.get_all(source.build_number_prefix)
            current = _find(runs, request.version)
            if current is None:
                self.log.debug("No current version, returning latest of %d run(s)", len(runs))
                return _latest(runs)
            since = build_runs.get_started_on_or_after(source.build_number_prefix, current.started)
        return CheckResponse([Version(run.build_number) for run in sorted(since)])


def _find(runs: List[BuildRun], version: Optional[Version]) -> Optional[BuildRun]:
    if version is None:
        return None
    return next((run for run in runs if run.build_number == version.build_number), None)


def _latest(runs: List[BuildRun]) -> CheckResponse:
    if not runs:
        return CheckResponse([])
    latest = max(runs, key=lambda run: run.started)
    return CheckResponse([Version(latest.build_number)])
