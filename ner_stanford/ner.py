"""
Stanford NER wrapper.

Provides the NER class that owns one tagger worker process and exposes
thread-safe entity extraction on top of it.
"""

from concurrent import futures
from typing import Dict, List, Optional

from .config.options import build_options
from .config.settings import DEFAULT_TIMEOUT
from .core.errors import WorkerExitedError, WorkerTimeoutError
from .core.sequencer import RequestSequencer
from .core.worker import WorkerProcess, build_command, check_paths, install_exit_handlers, remove_exit_handler


class NER:
    """Wraps the Stanford NER and provides interfaces for classification.

    Requests from any number of threads are queued and sent to the single
    worker one at a time, in arrival order.

    Args:
        install_path: Path to the Stanford NER directory. Default: ``stanford-ner-2015-12-09``
            next to the project.
        jar: The jar file for Stanford NER. Default: ``stanford-ner.jar``.
        classifier: The classifier to use. Default: ``english.all.3class.distsim.crf.ser.gz``.
        timeout: Default seconds ``get_entities`` waits for a result. ``None`` waits forever.
        command: Run this command as the worker instead of the Java classifier.
            Installation paths are not checked when it is given.
        install_signal_handlers: Kill the worker on SIGINT, SIGTERM and interpreter exit.
    """

    def __init__(self, install_path: Optional[str] = None, jar: Optional[str] = None,
                 classifier: Optional[str] = None, timeout: Optional[float] = DEFAULT_TIMEOUT,
                 command: Optional[List[str]] = None, install_signal_handlers: bool = True):
        self.options = build_options(install_path, jar, classifier)
        self.timeout = timeout
        self.exited = False
        self.install_signal_handlers = install_signal_handlers

        if command is None:
            check_paths(self.options)
            command = build_command(self.options)

        self.worker = WorkerProcess(command)
        self.sequencer = RequestSequencer(self.worker.write_line)
        self.worker.start(on_output=self.sequencer.feed, on_exit=self._on_worker_exit)

        if install_signal_handlers:
            install_exit_handlers(self.exit)

    def _on_worker_exit(self, returncode: int):
        self.sequencer.close(WorkerExitedError(f"NER worker exited with code {returncode}"))

    def submit(self, text: str) -> futures.Future:
        """Queue a text and return a future resolving to its entity maps.

        A request that is still queued can be withdrawn with ``future.cancel()``.
        """
        return self.sequencer.submit(text)

    def get_entities(self, text: str, timeout: Optional[float] = None) -> List[Dict[str, List[str]]]:
        """Return one dict per sentence mapping each entity type to the mentions classified as it.

        The text should not contain new line characters. Blocks until the worker
        has tagged the text; raises WorkerTimeoutError if that takes longer than
        ``timeout`` seconds (falling back to the instance default).
        """
        if timeout is None:
            timeout = self.timeout

        future = self.submit(text)

        try:
            return future.result(timeout=timeout)
        except WorkerTimeoutError:
            raise
        except futures.TimeoutError:
            pass

        error = WorkerTimeoutError(f"NER request did not complete within {timeout}s")
        if future.cancel():
            raise error

        # Already in flight: fail it unless the result arrived in the meantime
        self.sequencer.expire(future, error)
        return future.result()

    def exit(self):
        """Kills the worker process. Queued and in-flight requests fail with WorkerExitedError."""
        if self.exited:
            return
        self.exited = True

        self.sequencer.close(WorkerExitedError("NER worker was stopped"))
        self.worker.stop()
        if self.install_signal_handlers:
            remove_exit_handler(self.exit)
        print(f"[INFO] NER worker stopped")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.exit()
