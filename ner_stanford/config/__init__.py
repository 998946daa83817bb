"""
Configuration module for the Stanford NER bridge.

Contains installation defaults, worker settings and option builders.
"""

from .options import DEFAULT_OPTIONS, build_options, validate_options
from .settings import DEFAULT_TIMEOUT, MAX_WORKERS, get_classifier_path, get_jar_path, get_lib_classpath

__all__ = [
    'DEFAULT_OPTIONS',
    'build_options',
    'validate_options',
    'DEFAULT_TIMEOUT',
    'MAX_WORKERS',
    'get_classifier_path',
    'get_jar_path',
    'get_lib_classpath'
]
