"""
Worker process management for the Stanford NER bridge.

Validates the installation, builds the Java command line and runs the tagger as
a long-lived subprocess whose stdout is drained by a background thread.
"""

import atexit
import codecs
import os
import signal
import subprocess
import threading
from typing import Callable, Dict, List, Optional

from ..config.settings import (
    JAVA_EXECUTABLE, JAVA_MAX_MEMORY, CLASSIFIER_MAIN_CLASS, WORKER_ENCODING, WORKER_READ_SIZE,
    get_classifier_path, get_jar_path, get_lib_classpath
)
from .errors import ClassifierNotFoundError, WorkerExitedError

# Callbacks run on SIGINT/SIGTERM; the signal handlers themselves are installed once per process
_exit_callbacks: List[Callable[[], None]] = []
_exit_lock = threading.RLock()
_signals_installed = False

def check_paths(options: Dict[str, str]):
    """Check that the classifier and the jar can be found in the installation."""
    classifier_path = get_classifier_path(options["install_path"], options["classifier"])
    if not os.path.exists(classifier_path):
        raise ClassifierNotFoundError(f"Classifier could not be found at path: {classifier_path}")

    jar_path = get_jar_path(options["install_path"], options["jar"])
    if not os.path.exists(jar_path):
        raise ClassifierNotFoundError(f"NER jar could not be found at path: {jar_path}")

def build_command(options: Dict[str, str]) -> List[str]:
    """Build the command line that runs the CRF classifier over stdin."""
    install_path = options["install_path"]
    classpath = get_jar_path(install_path, options["jar"]) + os.pathsep + get_lib_classpath(install_path)

    return [
        JAVA_EXECUTABLE,
        JAVA_MAX_MEMORY,
        "-cp", classpath,
        CLASSIFIER_MAIN_CLASS,
        "-loadClassifier", get_classifier_path(install_path, options["classifier"]),
        "-readStdin"
    ]

def _run_exit_callbacks():
    with _exit_lock:
        callbacks = list(_exit_callbacks)
    for callback in callbacks:
        callback()

def install_exit_handlers(callback: Callable[[], None]):
    """Run ``callback`` at interpreter exit and on SIGINT/SIGTERM, then defer to the previous handler."""
    global _signals_installed

    atexit.register(callback)
    with _exit_lock:
        _exit_callbacks.append(callback)
        if _signals_installed:
            return

        if threading.current_thread() is not threading.main_thread():
            print(f"[WARNING] Signal handlers can only be installed from the main thread, relying on atexit")
            return

        for signum in (signal.SIGINT, signal.SIGTERM):
            previous = signal.getsignal(signum)

            def handler(received, frame, previous=previous):
                _run_exit_callbacks()
                if callable(previous):
                    previous(received, frame)
                elif previous == signal.SIG_DFL:
                    signal.signal(received, signal.SIG_DFL)
                    os.kill(os.getpid(), received)

            signal.signal(signum, handler)

        _signals_installed = True

def remove_exit_handler(callback: Callable[[], None]):
    """Forget a callback registered with ``install_exit_handlers``."""
    atexit.unregister(callback)
    with _exit_lock:
        if callback in _exit_callbacks:
            _exit_callbacks.remove(callback)


class WorkerProcess:
    """Long-lived tagger subprocess speaking a line-oriented text protocol."""

    def __init__(self, command: List[str]):
        self.command = command
        self.process: Optional[subprocess.Popen] = None
        self.reader: Optional[threading.Thread] = None
        self.lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self.process is not None and self.process.poll() is None

    def start(self, on_output: Callable[[str], None],
              on_exit: Optional[Callable[[int], None]] = None):
        """Spawn the worker and start forwarding its output to ``on_output``.

        Output is forwarded in chunks of whole lines, as they were read from
        the pipe. ``on_exit`` receives the return code once the worker is gone,
        or once its output can no longer be read.
        """
        print(f"[INFO] Starting NER worker: {' '.join(self.command)}")

        self.process = subprocess.Popen(
            self.command,
            stdin=subprocess.PIPE,
            stdout=subprocess.PIPE,
            stderr=subprocess.DEVNULL,
            bufsize=0
        )

        self.reader = threading.Thread(
            target=self._read_loop, args=(on_output, on_exit),
            name="ner-worker-reader", daemon=True
        )
        self.reader.start()

    def _read_loop(self, on_output: Callable[[str], None],
                   on_exit: Optional[Callable[[int], None]]):
        # Undecodable bytes become U+FFFD instead of killing the reader
        decoder = codecs.getincrementaldecoder(WORKER_ENCODING)(errors="replace")
        fd = self.process.stdout.fileno()
        partial = ""

        try:
            while True:
                data = os.read(fd, WORKER_READ_SIZE)
                if not data:
                    break

                # Hold back an unterminated last line until the rest of it arrives
                lines, newline, partial = (partial + decoder.decode(data)).rpartition("\n")
                if newline:
                    on_output(lines + newline)

            partial += decoder.decode(b"", final=True)
            if partial.strip():
                on_output(partial)
        except Exception as e:
            print(f"[ERROR] Reading NER worker output failed: {e}")
            if self.process.poll() is None:
                self.process.kill()
        finally:
            returncode = self.process.wait()
            print(f"[INFO] NER worker exited with code {returncode}")
            if on_exit is not None:
                on_exit(returncode)

    def write_line(self, text: str):
        """Send one line of text to the worker."""
        if not self.is_running:
            raise WorkerExitedError("The NER worker is not running")

        with self.lock:
            self.process.stdin.write((text.strip() + "\n").encode(WORKER_ENCODING))
            self.process.stdin.flush()

    def stop(self, timeout: float = 5.0):
        """Kill the worker and wait for it to go away."""
        if self.process is None:
            return

        if self.process.poll() is None:
            self.process.kill()

        try:
            self.process.stdin.close()
        except OSError as e:
            print(f"[WARNING] Could not close worker stdin: {e}")

        try:
            self.process.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            print(f"[WARNING] NER worker did not exit within {timeout}s")
