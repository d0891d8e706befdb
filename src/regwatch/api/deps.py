from __future__ import annotations

from typing import Generator

from regwatch.config import settings
from regwatch.timeline.service import TimelineService, build_timeline_service


def get_timeline_service() -> Generator[TimelineService, None, None]:
    # Fresh service per request: every page load is its own fetch attempt.
    yield build_timeline_service(settings.feeds)
