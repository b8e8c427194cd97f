"""Error handling policies for the two sync phases.

Issue listing retries transient failures forever: the watermark only moves
once the whole listing has been fetched. Backfill fails fast: everything already
saved survives, and the next run picks up where this one stopped.
"""

import logging
import time
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import TypeVar

from ..github_client.client import GitHubClientError

logger = logging.getLogger(__name__)

T = TypeVar("T")

RETRY_DELAY_SECONDS = 5.0


class FetchPolicy(ABC):
    """Decides what happens when a fetch raises ``GitHubClientError``."""

    retries = 0

    @abstractmethod
    def fetch(self, request: Callable[[], T], what: str) -> T:
        """Run ``request`` and return its result under this policy."""


class RetryForever(FetchPolicy):
    """Retry after a fixed delay until the request succeeds."""

    def __init__(
        self,
        delay: float = RETRY_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.delay = delay
        self.sleep = sleep
        self.retries = 0

    def fetch(self, request: Callable[[], T], what: str) -> T:
        while True:
            try:
                return request()
            except GitHubClientError as e:
                self.retries += 1
                logger.info("%s failed, retrying in %.0fs: %s", what, self.delay, e)
                self.sleep(self.delay)


class FailFast(FetchPolicy):
    """Let the first failure propagate and abort the run."""

    def fetch(self, request: Callable[[], T], what: str) -> T:
        try:
            return request()
        except GitHubClientError:
            logger.error("%s failed", what)
            raise
