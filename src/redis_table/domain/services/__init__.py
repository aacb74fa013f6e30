"""Domain services for redis_table.

Exports:
    Dispatch:
        - DispatchTable: Read-only verb registry
        - OperationDescriptor: Arity, coercions and invocation of one verb
        - ArityRule, ArityKind: Argument-count constraints
        - Coercion: Per-argument conversions
        - default_dispatch_table: The built-in registry
    Shaping:
        - ReplyShaper: Native reply to TabularResult
        - decode_text: Element-to-text rendering
"""

from redis_table.domain.services.dispatch_table import (
    ArityKind,
    ArityRule,
    Coercion,
    DispatchTable,
    OperationDescriptor,
    default_dispatch_table,
)
from redis_table.domain.services.reply_shaper import ReplyShaper, decode_text

__all__ = [
    # Dispatch
    "DispatchTable",
    "OperationDescriptor",
    "ArityRule",
    "ArityKind",
    "Coercion",
    "default_dispatch_table",
    # Shaping
    "ReplyShaper",
    "decode_text",
]
