import logging
from concurrent.futures import ThreadPoolExecutor
from typing import NamedTuple, Optional, Protocol

import requests

from regwatch.exceptions import FetchFailure

logger = logging.getLogger(__name__)

DEFAULT_URL_TEMPLATE = "https://docs.google.com/spreadsheets/d/{sheet_id}/gviz/tq"


def build_feed_url(sheet_id: str, sheet_name: str, template: str = DEFAULT_URL_TEMPLATE) -> str:
    base = template.format(sheet_id=sheet_id)
    return requests.Request("GET", base, params={"tqx": "out:json", "sheet": sheet_name}).prepare().url


class FeedProvider(Protocol):
    def fetch_text(self, locator: str) -> str:
        ...


class RawFeeds(NamedTuple):
    milestones: str
    config: str


class GvizFeedProvider:
    """
    Fetches gviz query responses as text. One attempt per call; timeouts are
    left to the transport.
    """

    def __init__(self, timeout_seconds: Optional[float] = None, session: Optional[requests.Session] = None):
        self.timeout_seconds = timeout_seconds
        self.session = session

    def fetch_text(self, locator: str) -> str:
        getter = self.session.get if self.session else requests.get
        try:
            resp = getter(locator, timeout=self.timeout_seconds)
        except requests.RequestException as exc:
            raise FetchFailure(f"Failed to fetch feed {locator}: {exc}") from exc

        if resp.status_code != 200:
            raise FetchFailure(f"Failed to fetch feed {locator}: {resp.status_code}")

        logger.debug("feed fetched", extra={"locator": locator, "bytes": len(resp.content or b"")})
        return resp.text


def fetch_feeds(provider: FeedProvider, milestones_locator: str, config_locator: str) -> RawFeeds:
    """
    Retrieves both feeds concurrently and waits for both.
    Either failure fails the pair; there is no partial result.
    """
    with ThreadPoolExecutor(max_workers=2, thread_name_prefix="feed") as pool:
        milestones_future = pool.submit(provider.fetch_text, milestones_locator)
        config_future = pool.submit(provider.fetch_text, config_locator)
        try:
            milestones_text = milestones_future.result()
            config_text = config_future.result()
        except FetchFailure:
            raise
        except Exception as exc:  # provider-specific transport error
            raise FetchFailure(str(exc) or type(exc).__name__) from exc

    return RawFeeds(milestones=milestones_text, config=config_text)
