from __future__ import annotations

import logging
from datetime import date
from typing import Callable, Optional

from regwatch.config import FeedSettings, settings
from regwatch.exceptions import TimelineError
from regwatch.sync.decoder import decode_response
from regwatch.sync.provider import FeedProvider, GvizFeedProvider, fetch_feeds
from regwatch.timeline.fallback import FallbackPolicy
from regwatch.timeline.models import TimelineDataset, TimelineLoadResult
from regwatch.timeline.normalizer import (
    normalize_config,
    normalize_milestones,
    resolve_last_updated,
    table_records,
)

logger = logging.getLogger(__name__)


class TimelineService:
    """
    Runs one fetch -> decode -> normalize pass over the milestone and config
    feeds. Any pipeline failure yields the fallback dataset plus a notice.
    """

    def __init__(
        self,
        provider: FeedProvider,
        feeds: Optional[FeedSettings] = None,
        fallback: Optional[FallbackPolicy] = None,
        today: Callable[[], date] = date.today,
    ):
        self.provider = provider
        self.feeds = feeds or settings.feeds
        self.fallback = fallback or FallbackPolicy()
        self.today = today

    def load_timeline(self) -> TimelineLoadResult:
        try:
            dataset = self._build_dataset()
        except TimelineError as exc:
            logger.warning(
                "timeline load failed, using fallback data",
                extra={"error_kind": type(exc).__name__, "error": str(exc)},
            )
            return self.fallback.recover(exc)
        return TimelineLoadResult(dataset=dataset)

    def _build_dataset(self) -> TimelineDataset:
        raw = fetch_feeds(self.provider, self.feeds.milestones_locator, self.feeds.config_locator)

        milestone_table = decode_response(raw.milestones)
        config_table = decode_response(raw.config)

        milestones = normalize_milestones(table_records(milestone_table, "milestones"))
        config = normalize_config(table_records(config_table, "config"))

        return TimelineDataset(
            last_updated=resolve_last_updated(config, self.today()),
            milestones=tuple(milestones),
        )


def build_timeline_service(feeds: Optional[FeedSettings] = None) -> TimelineService:
    feeds = feeds or settings.feeds
    provider = GvizFeedProvider(timeout_seconds=feeds.request_timeout_seconds)
    return TimelineService(provider=provider, feeds=feeds)
