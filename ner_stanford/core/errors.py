"""
Exception types for the Stanford NER bridge.
"""


class NERError(Exception):
    """Base class for all errors raised by the NER bridge."""


class ClassifierNotFoundError(NERError, FileNotFoundError):
    """A required installation file (classifier or jar) could not be found."""


class WorkerExitedError(NERError):
    """The classifier worker process is no longer available."""


class WorkerTimeoutError(NERError, TimeoutError):
    """A request did not complete within the caller's timeout."""
