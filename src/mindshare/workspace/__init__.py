"""Mindshare supervisor workspace: session state, filters and read models."""

from mindshare.workspace.filters import DEFAULT_FILTERS, BriefFilters
from mindshare.workspace.session import (
    DEFAULT_BASE_COUNT,
    DEFAULT_SEED,
    MINDSHARE_BASE_COUNT_ENV,
    MINDSHARE_DEFAULT_SEED_ENV,
    AuditSnapshot,
    LessonAssignment,
    LessonCompletion,
    LessonCounts,
    LowPerformer,
    MindshareStats,
    MindshareWorkspace,
    SampleRedline,
    WorkspaceInsights,
    get_default_base_count,
    get_default_seed,
)

__all__ = [
    "DEFAULT_BASE_COUNT",
    "DEFAULT_FILTERS",
    "DEFAULT_SEED",
    "MINDSHARE_BASE_COUNT_ENV",
    "MINDSHARE_DEFAULT_SEED_ENV",
    "AuditSnapshot",
    "BriefFilters",
    "LessonAssignment",
    "LessonCompletion",
    "LessonCounts",
    "LowPerformer",
    "MindshareStats",
    "MindshareWorkspace",
    "SampleRedline",
    "WorkspaceInsights",
    "get_default_base_count",
    "get_default_seed",
]
