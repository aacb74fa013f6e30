"""Inbound adapters for redis_table.

Inbound adapters handle incoming requests and convert them to
internal domain operations.

Exports:
    Command Parser:
        - CommandParser: Parser that converts command text to Commands
        - tokenize: Quote-aware tokenizer
    REST API:
        - create_app: Create a FastAPI application
        - run_server: Run the REST API server
"""

from redis_table.adapters.inbound.command_parser import CommandParser, tokenize
from redis_table.adapters.inbound.rest_api import (
    CommandRequest,
    TabularResponse,
    UpdateResponse,
    create_app,
    run_server,
)

__all__ = [
    # Command parser
    "CommandParser",
    "tokenize",
    # REST API
    "create_app",
    "run_server",
    "CommandRequest",
    "TabularResponse",
    "UpdateResponse",
]
