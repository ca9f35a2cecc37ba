"""Latest-wins publication of render outcomes."""

from __future__ import annotations

import logging
from collections.abc import Callable

from mermend.render.controller import RenderController
from mermend.render.models import PublishedOutcome, RenderOutcome

logger = logging.getLogger(__name__)


class ResultProjector:
    """Publishes only the outcome of the most recently issued request.

    Request ids come from a monotonically increasing counter; an outcome is
    published when its id still equals the newest id at publish time.
    Older outcomes are dropped without error. Runs on a single event loop,
    so the comparison needs no lock.
    """

    def __init__(self, on_publish: Callable[[PublishedOutcome], None] | None = None) -> None:
        self._on_publish = on_publish
        self._sequence = 0
        self._latest: PublishedOutcome | None = None
        self.discarded = 0

    @property
    def current_request(self) -> int:
        return self._sequence

    @property
    def latest(self) -> PublishedOutcome | None:
        return self._latest

    def issue(self) -> int:
        """Start a new request, superseding any still in flight."""
        self._sequence += 1
        return self._sequence

    def publish(self, request_id: int, outcome: RenderOutcome) -> bool:
        if request_id != self._sequence:
            self.discarded += 1
            logger.debug(
                "Discarding outcome of superseded request %d (latest is %d)",
                request_id,
                self._sequence,
            )
            return False
        self._latest = PublishedOutcome(request_id=request_id, outcome=outcome)
        if self._on_publish is not None:
            self._on_publish(self._latest)
        return True

    async def submit(self, controller: RenderController, source: str | None) -> RenderOutcome | None:
        """Issue, render and publish in one step.

        Returns the outcome if it was published, None if a newer request
        superseded it while rendering.
        """
        request_id = self.issue()
        outcome = await controller.render(source)
        if self.publish(request_id, outcome):
            return outcome
        return None
