from regwatch.timeline.details import GroupField, ListField, ScalarField, build_detail_nodes, render_details
from regwatch.timeline.fallback import FALLBACK_DATASET, FallbackPolicy, build_fallback_dataset
from regwatch.timeline.models import Milestone, TimelineDataset, TimelineLoadResult
from regwatch.timeline.normalizer import normalize_config, normalize_milestones, parse_sheet_date
from regwatch.timeline.service import TimelineService, build_timeline_service

__all__ = [
    "FALLBACK_DATASET",
    "FallbackPolicy",
    "GroupField",
    "ListField",
    "Milestone",
    "ScalarField",
    "TimelineDataset",
    "TimelineLoadResult",
    "TimelineService",
    "build_detail_nodes",
    "build_fallback_dataset",
    "build_timeline_service",
    "normalize_config",
    "normalize_milestones",
    "parse_sheet_date",
    "render_details",
]
