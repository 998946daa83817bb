"""
Core functionality module for the Stanford NER bridge.

Contains the tokenizer, the tagged output parser, the worker process and the request sequencer.
"""

from .errors import NERError, ClassifierNotFoundError, WorkerExitedError, WorkerTimeoutError
from .text_processor import tokenize, untag_token, count_tokens, normalize_whitespace
from .tagged_parser import parse_tagged_token, parse_tagged_line
from .worker import WorkerProcess, check_paths, build_command, install_exit_handlers, remove_exit_handler
from .sequencer import ClassificationRequest, RequestSequencer

__all__ = [
    'NERError',
    'ClassifierNotFoundError',
    'WorkerExitedError',
    'WorkerTimeoutError',
    'tokenize',
    'untag_token',
    'count_tokens',
    'normalize_whitespace',
    'parse_tagged_token',
    'parse_tagged_line',
    'WorkerProcess',
    'check_paths',
    'build_command',
    'install_exit_handlers',
    'remove_exit_handler',
    'ClassificationRequest',
    'RequestSequencer'
]
