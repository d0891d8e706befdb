from __future__ import annotations

from regwatch.timeline.models import Milestone, TimelineDataset, TimelineLoadResult


def build_fallback_dataset() -> TimelineDataset:
    return TimelineDataset(
        last_updated="2026-01-21",
        milestones=(
            Milestone(id="start", type="start", title="START", status="completed"),
            Milestone(
                id="final-rule",
                type="procedural",
                date="2026-01-21",
                title="FINAL RULE EFFECTIVE",
                subtitle="Consolidated License Procedure",
                description="Effective Date: Immediate",
                status="current",
                details={"summary": "Loading data from Google Sheets..."},
            ),
        ),
    )


FALLBACK_DATASET = build_fallback_dataset()


def describe_failure(exc: BaseException) -> str:
    return str(exc) or type(exc).__name__


class FallbackPolicy:
    """
    Swaps in a fixed dataset when a load attempt fails.
    Never mixes fallback milestones with fetched ones.
    """

    def __init__(self, dataset: TimelineDataset = FALLBACK_DATASET):
        self.dataset = dataset

    def recover(self, exc: BaseException) -> TimelineLoadResult:
        # Each recovery gets its own copy so callers never touch the shared constant.
        dataset = self.dataset.model_copy(deep=True)
        return TimelineLoadResult(dataset=dataset, error=describe_failure(exc))
