from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_serializer
from pydantic.alias_generators import to_camel


class TimelineModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class Milestone(TimelineModel):
    id: str
    type: str = ""
    date: Optional[str] = None
    title: str = ""
    subtitle: Optional[str] = None
    description: Optional[str] = None
    status: str = ""
    is_risk: bool = False
    is_catalyst: bool = False
    is_outcome: bool = False
    catalyst_order: Optional[int] = None
    details: Optional[dict[str, Any]] = None

    @property
    def is_statutory(self) -> bool:
        return self.type == "statutory"

    @property
    def has_details(self) -> bool:
        return self.details is not None

    @model_serializer(mode="wrap")
    def _serialize(self, handler, info):
        data = handler(self)
        data["isStatutory" if info.by_alias else "is_statutory"] = self.is_statutory
        # Milestones without a detail panel carry no details key at all.
        if self.details is None:
            data.pop("details", None)
        return data


class TimelineDataset(TimelineModel):
    last_updated: str
    milestones: tuple[Milestone, ...] = Field(default_factory=tuple)


class TimelineLoadResult(BaseModel):
    """
    What the presentation layer receives: the dataset and, when the
    fallback was used, the notice to show.
    """

    dataset: TimelineDataset
    error: Optional[str] = None

    @property
    def using_fallback(self) -> bool:
        return self.error is not None

    def to_payload(self) -> dict[str, Any]:
        payload = self.dataset.model_dump(mode="json", by_alias=True)
        payload["error"] = self.error
        payload["usingFallback"] = self.using_fallback
        return payload
