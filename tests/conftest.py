import json
from datetime import date

import pytest

from regwatch.config import FeedSettings
from regwatch.exceptions import FetchFailure

MILESTONES_URL = "https://example.test/milestones"
CONFIG_URL = "https://example.test/config"


def make_gviz(columns, rows, *, status="ok"):
    """
    Render a gviz `out:json` response the way Google Sheets sends it.
    Each row is a list of raw values; None becomes a null cell.
    """
    document = {
        "version": "0.6",
        "reqId": "0",
        "status": status,
        "sig": "1234",
        "table": {
            "cols": [{"id": chr(65 + i), "label": label, "type": "string"} for i, label in enumerate(columns)],
            "rows": [{"c": [None if value is None else {"v": value} for value in row]} for row in rows],
            "parsedNumHeaders": 1,
        },
    }
    return "/*O_o*/\ngoogle.visualization.Query.setResponse(" + json.dumps(document) + ");"


class FakeFeedProvider:
    def __init__(self, responses: dict):
        self.responses = responses
        self.calls: list[str] = []

    def fetch_text(self, locator: str) -> str:
        self.calls.append(locator)
        response = self.responses[locator]
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def gviz():
    return make_gviz


@pytest.fixture
def feeds():
    return FeedSettings(milestones_url=MILESTONES_URL, config_url=CONFIG_URL)


@pytest.fixture
def fixed_today():
    return lambda: date(2026, 10, 16)


@pytest.fixture
def sample_milestones_text():
    return make_gviz(
        ["id", "type", "date", "title", "status", "details_summary"],
        [
            ["start", "start", None, "START", "completed", None],
            ["m1", "procedural", "Date(2026,0,21)", "FINAL RULE", "current", "Effective now"],
        ],
    )


@pytest.fixture
def sample_config_text():
    return make_gviz(["key", "value"], [["lastUpdated", "2026-01-21"]])


@pytest.fixture
def provider_factory():
    def _build(milestones, config):
        return FakeFeedProvider({MILESTONES_URL: milestones, CONFIG_URL: config})

    return _build


@pytest.fixture
def network_down():
    return FetchFailure("Failed to fetch feed: network down")
