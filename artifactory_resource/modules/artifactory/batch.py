"""Category-ordered, parallel deployment of artifact batches."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, wait
from typing import Callable, Generic, Mapping, Sequence, TypeVar

from artifactory_resource.modules.files.fileset import Category

T = TypeVar("T")


class BatchDeployer(Generic[T]):
    """Run ``deploy`` for every item, one category at a time.

    Items of a category are deployed concurrently and the next category only
    starts once all of them have finished. The first failure of a category (in
    submission order) is raised after its siblings have completed.
    """

    def __init__(self, threads: int = 1) -> None:
        self.threads = max(1, threads)
        self.log = logging.getLogger(self.__class__.__name__)

    def deploy_all(self, batches: Mapping[Category, Sequence[T]], deploy: Callable[[T], None]) -> None:
        ordered = sorted(batches.items(), key=lambda item: item[0].priority)
        with ThreadPoolExecutor(max_workers=self.threads) as executor:
            for category, items in ordered:
                if not items:
                    continue
                self.log.debug(
                    "Deploying %d %s artifact(s) using %d thread(s)", len(items), category.value, self.threads
                )
                futures = [executor.submit(deploy, item) for item in items]
                wait(futures)
                for future in futures:
                    future.result()
