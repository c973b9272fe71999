"""Optimizer options (``table.optimizer.*``)."""

from __future__ import annotations

from ._types import ConfigOption

AGG_PHASE_STRATEGY = ConfigOption(
    key="table.optimizer.agg-phase-strategy",
    default_value="AUTO",
    description="Aggregate phase strategy: AUTO, TWO_PHASE or ONE_PHASE.",
)
REUSE_SUB_PLAN_ENABLED = ConfigOption(
    key="table.optimizer.reuse-sub-plan-enabled",
    default_value=True,
    description="Whether the optimizer reuses identical sub-plans.",
    data_type=bool,
)
REUSE_SOURCE_ENABLED = ConfigOption(
    key="table.optimizer.reuse-source-enabled",
    default_value=True,
    description="Whether the optimizer reuses identical table sources.",
    data_type=bool,
)
PREDICATE_PUSHDOWN_ENABLED = ConfigOption(
    key="table.optimizer.source.predicate-pushdown-enabled",
    default_value=True,
    description="Whether predicates are pushed down into filterable sources.",
    data_type=bool,
)
JOIN_REORDER_ENABLED = ConfigOption(
    key="table.optimizer.join-reorder-enabled",
    default_value=False,
    description="Whether the optimizer may reorder joins.",
    data_type=bool,
)
DISTINCT_AGG_SPLIT_ENABLED = ConfigOption(
    key="table.optimizer.distinct-agg.split.enabled",
    default_value=False,
    description="Whether distinct aggregates are split into two levels to reduce skew.",
    data_type=bool,
)
DISTINCT_AGG_SPLIT_BUCKET_NUM = ConfigOption(
    key="table.optimizer.distinct-agg.split.bucket-num",
    default_value=1024,
    description="Number of buckets used when splitting distinct aggregates.",
    data_type=int,
)
JOIN_BROADCAST_THRESHOLD = ConfigOption(
    key="table.optimizer.join.broadcast-threshold",
    default_value=10 * 1024 * 1024,
    description="Maximum size in bytes of a table broadcast to all workers for a join. -1 disables broadcasting.",
    data_type=int,
)


def options() -> list[ConfigOption]:
    """Return every optimizer option, in declaration order."""
    return [
        AGG_PHASE_STRATEGY,
        REUSE_SUB_PLAN_ENABLED,
        REUSE_SOURCE_ENABLED,
        PREDICATE_PUSHDOWN_ENABLED,
        JOIN_REORDER_ENABLED,
        DISTINCT_AGG_SPLIT_ENABLED,
        DISTINCT_AGG_SPLIT_BUCKET_NUM,
        JOIN_BROADCAST_THRESHOLD,
    ]
