"""Build-run queries, by server-side search or by filtering the plain listing."""

from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

import httpx

from artifactory_resource.exceptions import ServerResponseError
from artifactory_resource.modules.artifactory.domain import (
    BuildInfo,
    BuildModule,
    BuildRun,
    ContinuousIntegrationAgent,
    DeployedArtifact,
    format_date,
    to_utc,
)
from artifactory_resource.modules.artifactory.http import join_url, send

log = logging.getLogger(__name__)

AQL_PATH = "api/search/aql"


class BuildRunsStrategy(Protocol):
    """Common interface for the ways build runs can be found."""

    def find(
        self, prefix: Optional[str] = None, started_on_or_after: Optional[datetime] = None
    ) -> List[BuildRun]:  # pragma: no cover - interface
        ...


class SearchBuildRunsStrategy:
    """Single ``builds.find`` AQL query; needs admin rights on the server."""

    def __init__(
        self,
        client: httpx.Client,
        base_url: str,
        build_name: str,
        limit: Optional[int] = None,
    ) -> None:
        self._client = client
        self.base_url = base_url
        self.build_name = build_name
        self.limit = limit

    def find(
        self, prefix: Optional[str] = None, started_on_or_after: Optional[datetime] = None
    ) -> List[BuildRun]:
        query = self.build_query(prefix, started_on_or_after)
        log.debug("Searching build runs with %s", query)
        results = _post_aql(self._client, self.base_url, query)
        return [BuildRun.from_search(result) for result in results]

    def build_query(self, prefix: Optional[str] = None, started_on_or_after: Optional[datetime] = None) -> str:
        criteria: Dict[str, Any] = {"name": self.build_name}
        if started_on_or_after is not None:
            criteria["started"] = {"$gte": format_date(started_on_or_after)}
        if prefix:
            criteria["number"] = {"$match": prefix + "*"}
        query = f"builds.find({json.dumps(criteria)})"
        if self.limit:
            query += f'.sort({{"$desc": ["started"]}}).limit({self.limit})'
        return query


class ListBuildRunsStrategy:
    """Fetch every run from ``api/build/{name}`` and filter on the client."""

    def __init__(
        self,
        client: httpx.Client,
        base_url: str,
        build_name: str,
        project: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> None:
        self._client = client
        self.base_url = base_url
        self.build_name = build_name
        self.project = project
        self.limit = limit

    def find(
        self, prefix: Optional[str] = None, started_on_or_after: Optional[datetime] = None
    ) -> List[BuildRun]:
        runs = self._fetch()
        if self.limit:
            # limit is applied before filtering
            runs = sorted(runs, key=lambda run: run.started, reverse=True)[: self.limit]
        if prefix:
            runs = [run for run in runs if run.build_number.startswith(prefix)]
        if started_on_or_after is not None:
            started_on_or_after = to_utc(started_on_or_after)
            runs = [run for run in runs if run.started >= started_on_or_after]
        return runs

    def _fetch(self) -> List[BuildRun]:
        url = join_url(self.base_url, f"api/build/{self.build_name}")
        try:
            response = send(self._client, "GET", url, params=_project_params(self.project))
        except ServerResponseError as exc:
            if exc.status_code == 404:
                log.debug("No build runs found for %s", self.build_name)
                return []
            raise
        payload = response.json()
        return [BuildRun.from_listing(item) for item in payload.get("buildsNumbers") or []]


class ArtifactoryBuildRuns:
    """Queries and registration of the runs of a single named build."""

    def __init__(
        self,
        client: httpx.Client,
        base_url: str,
        build_name: str,
        project: Optional[str] = None,
        limit: Optional[int] = None,
        admin: bool = False,
    ) -> None:
        if not build_name:
            raise ValueError("Build name must not be empty")
        self._client = client
        self.base_url = base_url.rstrip("/")
        self.build_name = build_name
        self.project = project
        self.log = logging.getLogger(self.__class__.__name__)
        self.strategy: BuildRunsStrategy
        if admin:
            self.strategy = SearchBuildRunsStrategy(client, self.base_url, build_name, limit)
        else:
            self.strategy = ListBuildRunsStrategy(client, self.base_url, build_name, project, limit)

    def get_all(self, prefix: Optional[str] = None) -> List[BuildRun]:
        return self.strategy.find(prefix)

    def get_started_on_or_after(self, prefix: Optional[str], timestamp: datetime) -> List[BuildRun]:
        return self.strategy.find(prefix, timestamp)

    def get_deployed_artifacts(self, build_number: str) -> List[DeployedArtifact]:
        if not build_number:
            raise ValueError("Build number must not be empty")
        criteria = {"@build.name": self.build_name, "@build.number": build_number}
        results = _post_aql(self._client, self.base_url, f"items.find({json.dumps(criteria)})")
        return [DeployedArtifact.from_dict(result) for result in results]

    def get_raw_build_info(self, build_number: str) -> str:
        if not build_number:
            raise ValueError("Build number must not be empty")
        url = join_url(self.base_url, f"api/build/{self.build_name}/{build_number}")
        return send(self._client, "GET", url, params=_project_params(self.project)).text

    def add(
        self,
        build_number: str,
        build_uri: Optional[str] = None,
        agent: Optional[ContinuousIntegrationAgent] = None,
        started: Optional[datetime] = None,
        modules: Optional[Sequence[BuildModule]] = None,
        properties: Optional[Mapping[str, str]] = None,
    ) -> BuildInfo:
        build_info = BuildInfo(
            build_name=self.build_name,
            build_number=build_number,
            agent=agent,
            started=started,
            build_uri=build_uri,
            modules=list(modules or []),
            properties=dict(properties or {}),
        )
        url = join_url(self.base_url, "api/build")
        self.log.info("Adding build run %s #%s", self.build_name, build_number)
        send(self._client, "PUT", url, params=_project_params(self.project), json=build_info.as_dict())
        return build_info


def _post_aql(client: httpx.Client, base_url: str, query: str) -> List[Dict[str, Any]]:
    url = join_url(base_url, AQL_PATH)
    response = send(client, "POST", url, content=query, headers={"Content-Type": "text/plain"})
    return response.json().get("results") or []


def _project_params(project: Optional[str]) -> Dict[str, str]:
    return {"project": project} if project else {}
