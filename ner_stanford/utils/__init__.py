"""
Utility modules for the Stanford NER bridge.

Contains entity aggregation and CLI parsing utilities.
"""

from .entity_aggregator import EntityAggregator
from .cli_parser import parse_arguments, configure_options, validate_arguments

__all__ = [
    'EntityAggregator',
    'parse_arguments',
    'configure_options',
    'validate_arguments'
]
