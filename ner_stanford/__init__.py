"""
Stanford NER Bridge Package

Runs the Stanford named entity recognizer as a long-lived worker process and
serializes concurrent extraction requests against it.
"""

__version__ = "1.0.0"
__author__ = "NER Development Team"

from .ner import NER
from .core.errors import NERError, ClassifierNotFoundError, WorkerExitedError, WorkerTimeoutError
from .core.tagged_parser import parse_tagged_line
from .core.sequencer import RequestSequencer

__all__ = [
    'NER',
    'NERError',
    'ClassifierNotFoundError',
    'WorkerExitedError',
    'WorkerTimeoutError',
    'parse_tagged_line',
    'RequestSequencer'
]
