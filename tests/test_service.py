from regwatch.exceptions import ConfigError, DecodeFailure, FetchFailure
from regwatch.config import FeedSettings
from regwatch.timeline.fallback import FALLBACK_DATASET, FallbackPolicy, build_fallback_dataset, describe_failure
from regwatch.timeline.models import Milestone, TimelineDataset
from regwatch.timeline.service import TimelineService

from conftest import CONFIG_URL, MILESTONES_URL


def test_end_to_end_dataset(feeds, fixed_today, provider_factory, sample_milestones_text, sample_config_text):
    provider = provider_factory(sample_milestones_text, sample_config_text)
    service = TimelineService(provider=provider, feeds=feeds, today=fixed_today)

    result = service.load_timeline()

    assert result.error is None
    assert result.using_fallback is False
    dataset = result.dataset
    assert dataset.last_updated == "2026-01-21"
    start, m1 = dataset.milestones
    assert start.id == "start"
    assert start.type == "start"
    assert start.title == "START"
    assert start.status == "completed"
    assert start.date is None
    assert start.has_details is False
    assert m1.id == "m1"
    assert m1.date == "2026-01-21"
    assert m1.status == "current"
    assert m1.details == {"summary": "Effective now"}
    assert sorted(provider.calls) == sorted([MILESTONES_URL, CONFIG_URL])


def test_payload_uses_camel_case_and_omits_empty_details(
    feeds, fixed_today, provider_factory, sample_milestones_text, sample_config_text
):
    service = TimelineService(
        provider=provider_factory(sample_milestones_text, sample_config_text), feeds=feeds, today=fixed_today
    )

    payload = service.load_timeline().to_payload()

    assert payload["lastUpdated"] == "2026-01-21"
    assert payload["error"] is None
    assert payload["usingFallback"] is False
    start, m1 = payload["milestones"]
    assert "details" not in start
    assert start["isStatutory"] is False
    assert start["isRisk"] is False
    assert start["catalystOrder"] is None
    assert m1["details"] == {"summary": "Effective now"}


def test_missing_last_updated_uses_today(feeds, fixed_today, provider_factory, sample_milestones_text, gviz):
    service = TimelineService(
        provider=provider_factory(sample_milestones_text, gviz(["key", "value"], [["banner", "x"]])),
        feeds=feeds,
        today=fixed_today,
    )
    assert service.load_timeline().dataset.last_updated == "2026-10-16"


def test_decode_failure_returns_fallback(feeds, fixed_today, provider_factory, sample_config_text):
    service = TimelineService(
        provider=provider_factory("<html>Sign in to continue</html>", sample_config_text),
        feeds=feeds,
        today=fixed_today,
    )

    result = service.load_timeline()

    assert result.using_fallback is True
    assert result.error
    assert result.dataset == FALLBACK_DATASET
    assert result.dataset is not FALLBACK_DATASET
    assert result.dataset.milestones[0].id == "start"
    assert result.dataset.milestones[0].status == "completed"


def test_config_feed_failure_discards_good_milestones(
    feeds, fixed_today, provider_factory, sample_milestones_text
):
    service = TimelineService(
        provider=provider_factory(sample_milestones_text, "not a gviz response"),
        feeds=feeds,
        today=fixed_today,
    )

    result = service.load_timeline()

    assert result.using_fallback is True
    assert [m.id for m in result.dataset.milestones] == ["start", "final-rule"]


def test_fetch_failure_returns_fallback_with_message(feeds, fixed_today, provider_factory, sample_config_text, network_down):
    service = TimelineService(
        provider=provider_factory(network_down, sample_config_text), feeds=feeds, today=fixed_today
    )

    result = service.load_timeline()

    assert result.using_fallback is True
    assert "network down" in result.error


def test_config_error_returns_fallback(fixed_today, provider_factory, sample_milestones_text, sample_config_text):
    feeds = FeedSettings(sheet_id="", milestones_url=None, config_url=None)
    service = TimelineService(
        provider=provider_factory(sample_milestones_text, sample_config_text), feeds=feeds, today=fixed_today
    )

    result = service.load_timeline()

    assert result.using_fallback is True
    assert "sheet_id" in result.error


def test_injected_fallback_dataset_is_used(feeds, fixed_today, provider_factory, sample_config_text):
    custom = TimelineDataset(last_updated="2026-02-01", milestones=(Milestone(id="only", status="current"),))
    service = TimelineService(
        provider=provider_factory(DecodeFailure("bad"), sample_config_text),
        feeds=feeds,
        fallback=FallbackPolicy(dataset=custom),
        today=fixed_today,
    )

    result = service.load_timeline()

    assert result.dataset == custom
    assert result.error == "bad"


def test_fallback_dataset_shape():
    dataset = build_fallback_dataset()
    assert dataset.last_updated == "2026-01-21"
    start, current = dataset.milestones
    assert (start.id, start.type, start.status) == ("start", "start", "completed")
    assert start.has_details is False
    assert (current.id, current.type, current.status) == ("final-rule", "procedural", "current")
    assert current.details == {"summary": "Loading data from Google Sheets..."}


def test_describe_failure_uses_class_name_for_empty_message():
    assert describe_failure(FetchFailure()) == "FetchFailure"
    assert describe_failure(ConfigError("missing sheet")) == "missing sheet"


def test_editing_a_fallback_result_does_not_leak_into_the_next():
    policy = FallbackPolicy()
    first = policy.recover(RuntimeError("first"))
    first.dataset.milestones[1].details["summary"] = "edited by caller"

    second = policy.recover(RuntimeError("second"))

    assert second.dataset.milestones[1].details == {"summary": "Loading data from Google Sheets..."}
    assert FALLBACK_DATASET.milestones[1].details == {"summary": "Loading data from Google Sheets..."}
