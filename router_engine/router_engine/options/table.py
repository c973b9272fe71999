"""Table environment options (``table.*``)."""

from __future__ import annotations

from ._types import ConfigOption

SQL_DIALECT = ConfigOption(
    key="table.sql-dialect",
    default_value="default",
    description="SQL dialect used to parse statements: default or hive.",
)
LOCAL_TIME_ZONE = ConfigOption(
    key="table.local-time-zone",
    default_value="default",
    description="Session time zone, e.g. UTC or America/Los_Angeles. 'default' uses the system zone.",
)
DML_SYNC = ConfigOption(
    key="table.dml-sync",
    default_value=False,
    description="Whether DML statements wait for the job to finish.",
    data_type=bool,
)
DYNAMIC_TABLE_OPTIONS_ENABLED = ConfigOption(
    key="table.dynamic-table-options.enabled",
    default_value=False,
    description="Whether table options may be overridden per query with hints.",
    data_type=bool,
)
GENERATED_CODE_MAX_LENGTH = ConfigOption(
    key="table.generated-code.max-length",
    default_value=64000,
    description="Length above which generated code is split into sub-functions.",
    data_type=int,
)


def options() -> list[ConfigOption]:
    """Return every table option, in declaration order."""
    return [
        SQL_DIALECT,
        LOCAL_TIME_ZONE,
        DML_SYNC,
        DYNAMIC_TABLE_OPTIONS_ENABLED,
        GENERATED_CODE_MAX_LENGTH,
    ]
