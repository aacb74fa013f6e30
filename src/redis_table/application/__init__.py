"""Application layer - use cases and orchestration.

Exports:
    - TableEngine: Entry point owning the store connection provider
    - Statement: Execution context that owns cursors
    - TabularCursor: Scrollable cursor over one result
    - ResultMetadata: Column descriptions of a result
    - CommandExecutor, ExecutionOutcome: Parse, dispatch and shape one command
"""

from redis_table.application.cursor import TabularCursor
from redis_table.application.executor import CommandExecutor, ExecutionOutcome
from redis_table.application.metadata import ResultMetadata
from redis_table.application.statement import Statement, update_count_of
from redis_table.application.table_engine import TableEngine

__all__ = [
    "TableEngine",
    "Statement",
    "TabularCursor",
    "ResultMetadata",
    "CommandExecutor",
    "ExecutionOutcome",
    "update_count_of",
]
