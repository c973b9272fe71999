"""Execution options (``table.exec.*``): runtime behaviour of table programs."""

from __future__ import annotations

from ._types import ConfigOption

STATE_TTL = ConfigOption(
    key="table.exec.state.ttl",
    default_value="0 ms",
    description=(
        "Minimum time an idle state is retained before it may be cleaned up. "
        "0 means state is never cleaned up."
    ),
)
SOURCE_IDLE_TIMEOUT = ConfigOption(
    key="table.exec.source.idle-timeout",
    default_value="0 ms",
    description="Time after which a source partition with no records is marked idle.",
)
SOURCE_CDC_EVENTS_DUPLICATE = ConfigOption(
    key="table.exec.source.cdc-events-duplicate",
    default_value=False,
    description="Whether the CDC source may produce duplicate change events.",
    data_type=bool,
)
SINK_NOT_NULL_ENFORCER = ConfigOption(
    key="table.exec.sink.not-null-enforcer",
    default_value="ERROR",
    description="How to handle NULL written into a NOT NULL column: ERROR or DROP.",
)
SINK_UPSERT_MATERIALIZE = ConfigOption(
    key="table.exec.sink.upsert-materialize",
    default_value="AUTO",
    description="Materialise upsert changes before the sink: NONE, AUTO or FORCE.",
)
SORT_DEFAULT_LIMIT = ConfigOption(
    key="table.exec.sort.default-limit",
    default_value=-1,
    description="Default limit applied to ORDER BY without LIMIT. -1 disables it.",
    data_type=int,
)
SPILL_COMPRESSION_ENABLED = ConfigOption(
    key="table.exec.spill-compression.enabled",
    default_value=True,
    description="Whether to compress spilled data.",
    data_type=bool,
)
SPILL_COMPRESSION_BLOCK_SIZE = ConfigOption(
    key="table.exec.spill-compression.block-size",
    default_value="64 kb",
    description="Memory size used for compression when spilling data.",
)
RESOURCE_DEFAULT_PARALLELISM = ConfigOption(
    key="table.exec.resource.default-parallelism",
    default_value=-1,
    description="Default parallelism for all operators. -1 uses the environment default.",
    data_type=int,
)
WINDOW_AGG_BUFFER_SIZE_LIMIT = ConfigOption(
    key="table.exec.window-agg.buffer-size-limit",
    default_value=100000,
    description="Buffer size used by group window aggregation.",
    data_type=int,
)
ASYNC_LOOKUP_BUFFER_CAPACITY = ConfigOption(
    key="table.exec.async-lookup.buffer-capacity",
    default_value=100,
    description="Maximum number of in-flight requests an async lookup join may trigger.",
    data_type=int,
)
ASYNC_LOOKUP_TIMEOUT = ConfigOption(
    key="table.exec.async-lookup.timeout",
    default_value="3 min",
    description="Timeout for an asynchronous lookup operation.",
)
MINI_BATCH_ENABLED = ConfigOption(
    key="table.exec.mini-batch.enabled",
    default_value=False,
    description="Whether mini-batching buffers input records to reduce state access.",
    data_type=bool,
)
MINI_BATCH_ALLOW_LATENCY = ConfigOption(
    key="table.exec.mini-batch.allow-latency",
    default_value="0 ms",
    description="Maximum latency used to buffer input records in a mini-batch.",
)
MINI_BATCH_SIZE = ConfigOption(
    key="table.exec.mini-batch.size",
    default_value=-1,
    description="Maximum number of input records buffered in a mini-batch.",
    data_type=int,
)
DISABLED_OPERATORS = ConfigOption(
    key="table.exec.disabled-operators",
    default_value=None,
    description="Comma-separated operator names to disable, e.g. NestedLoopJoin.",
)
SHUFFLE_MODE = ConfigOption(
    key="table.exec.shuffle-mode",
    default_value="ALL_EDGES_BLOCKING",
    description="Data exchange mode between operators in batch jobs.",
)


def options() -> list[ConfigOption]:
    """Return every execution option, in declaration order."""
    return [
        STATE_TTL,
        SOURCE_IDLE_TIMEOUT,
        SOURCE_CDC_EVENTS_DUPLICATE,
        SINK_NOT_NULL_ENFORCER,
        SINK_UPSERT_MATERIALIZE,
        SORT_DEFAULT_LIMIT,
        SPILL_COMPRESSION_ENABLED,
        SPILL_COMPRESSION_BLOCK_SIZE,
        RESOURCE_DEFAULT_PARALLELISM,
        WINDOW_AGG_BUFFER_SIZE_LIMIT,
        ASYNC_LOOKUP_BUFFER_CAPACITY,
        ASYNC_LOOKUP_TIMEOUT,
        MINI_BATCH_ENABLED,
        MINI_BATCH_ALLOW_LATENCY,
        MINI_BATCH_SIZE,
        DISABLED_OPERATORS,
        SHUFFLE_MODE,
    ]
