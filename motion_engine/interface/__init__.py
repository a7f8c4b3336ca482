"""Command interface: rule-based intent parsing and intent dispatch."""

from motion_engine.interface.dispatcher import DispatchResult, IntentDispatcher
from motion_engine.interface.intent_parser import parse_clause, parse_command, split_commands

__all__ = [
    "DispatchResult",
    "IntentDispatcher",
    "parse_clause",
    "parse_command",
    "split_commands",
]
