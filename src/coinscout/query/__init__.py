from coinscout.query.base import QueryGenerator
from coinscout.query.claude import DEFAULT_SYSTEM_PROMPT, ClaudeQueryGenerator
from coinscout.query.noop import NoOpQueryGenerator

__all__ = [
    "ClaudeQueryGenerator",
    "DEFAULT_SYSTEM_PROMPT",
    "NoOpQueryGenerator",
    "QueryGenerator",
]
