"""
Request sequencer for the Stanford NER bridge.

The tagger reads one line at a time from stdin and answers asynchronously on
stdout, so only one request may be in flight at once. The sequencer queues
concurrent requests in arrival order, hands them to the worker one by one and
routes each output line back to the request that is in flight.

A request is complete once the worker has printed as many meaningful tokens as
the request's text contains. Sentence count is unknown in advance (the tagger
may split one input line into several output lines), so completion is counted
in tokens, not lines.
"""

import threading
import uuid
from collections import deque
from concurrent.futures import Future
from typing import Callable, Deque, Dict, List, Optional

from .errors import NERError, WorkerExitedError
from .tagged_parser import parse_tagged_line
from .text_processor import count_tokens


class ClassificationRequest:
    """A text queued for, or being classified by, the worker."""

    def __init__(self, text: str):
        self.request_id = uuid.uuid4().hex[:8]
        self.text = text
        self.future: Future = Future()
        self.result: List[Dict[str, List[str]]] = []
        self.remaining_tokens = 0
        self.expired = False


class RequestSequencer:
    """Admits one request at a time to the worker and routes its output back.

    ``write_line`` sends one line of text to the worker. Everything the worker
    prints must be passed to ``feed`` in the order it was printed.
    """

    def __init__(self, write_line: Callable[[str], None]):
        self.write_line = write_line
        self.is_busy = False
        self.queue: Deque[ClassificationRequest] = deque()
        self.current: Optional[ClassificationRequest] = None
        self.closed = False
        self.lock = threading.RLock()

    @property
    def pending_count(self) -> int:
        """Number of requests waiting behind the one in flight."""
        with self.lock:
            return len(self.queue)

    def submit(self, text: str) -> Future:
        """Queue a text for classification and return a future for its entity maps."""
        text = text.strip()
        if "\n" in text or "\r" in text:
            raise ValueError("Text to classify must not contain new line characters")

        request = ClassificationRequest(text)

        with self.lock:
            if self.closed:
                raise WorkerExitedError("The NER worker is not running")

            if not text:
                # The worker prints nothing for an empty line
                request.future.set_result([])
                return request.future

            if self.is_busy:
                self.queue.append(request)
                print(f"      [DEBUG] Request {request.request_id} queued | waiting={len(self.queue)}")
                return request.future

            self._start(request)

        self._send(request)
        return request.future

    def _start(self, request: ClassificationRequest) -> bool:
        """Make ``request`` the in-flight request. Caller holds the lock."""
        if not request.future.set_running_or_notify_cancel():
            print(f"      [DEBUG] Request {request.request_id} was cancelled while queued, skipping")
            return False

        request.remaining_tokens = count_tokens(request.text)
        self.current = request
        self.is_busy = True
        print(f"      [DEBUG] Dispatching request {request.request_id} | budget={request.remaining_tokens} tokens")
        return True

    def _next_request(self) -> Optional[ClassificationRequest]:
        """Dequeue the oldest request that was not cancelled and start it. Caller holds the lock."""
        while self.queue:
            request = self.queue.popleft()
            if self._start(request):
                return request
        return None

    def _detach(self, request: ClassificationRequest) -> bool:
        """Clear the in-flight state. Returns whether the request's future still needs settling."""
        if self.current is not request:
            return False
        self.current = None
        self.is_busy = False
        return not request.expired

    def _send(self, request: Optional[ClassificationRequest]):
        """Write a started request to the worker, failing over to the next one if the write fails."""
        while request is not None:
            try:
                self.write_line(request.text)
                return
            except (OSError, ValueError, NERError) as e:
                print(f"      [ERROR] Could not send request {request.request_id} to the worker: {e}")
                failed = request
                with self.lock:
                    settle = self._detach(failed)
                    request = self._next_request()
                if settle:
                    failed.future.set_exception(WorkerExitedError(f"Could not write to the NER worker: {e}"))

    def feed(self, chunk: str):
        """Attribute a chunk of worker output to the request in flight."""
        completed = False

        for line in chunk.strip().split("\n"):
            line = line.strip()
            if not line:
                continue

            if completed:
                # Anything after the budget was met in this chunk predates the next request
                print(f"      [WARNING] Dropping unattributed worker output: {line[:80]}")
                continue

            completed = self._feed_line(line)

    def _feed_line(self, line: str) -> bool:
        """Account one tagged line. Returns True when it completed the request in flight."""
        with self.lock:
            request = self.current
            if request is None:
                print(f"      [WARNING] Dropping unattributed worker output: {line[:80]}")
                return False

            request.result.append(parse_tagged_line(line))
            request.remaining_tokens -= count_tokens(line, tagged=True)

            if request.remaining_tokens > 0:
                return False

            settle = self._detach(request)
            next_request = self._next_request()

        print(f"      [DEBUG] Request {request.request_id} completed | sentences={len(request.result)}")

        # The finished request resolves before the next text reaches the worker
        if settle:
            request.future.set_result(request.result)
        self._send(next_request)
        return True

    def expire(self, future: Future, error: Exception) -> bool:
        """Fail the in-flight request owning ``future`` with ``error``.

        The request keeps receiving the worker's output until its budget is
        used up, so its late lines are never handed to the next request.
        """
        with self.lock:
            request = self.current
            if request is None or request.future is not future or request.expired:
                return False
            request.expired = True

        print(f"      [WARNING] Request {request.request_id} expired with {request.remaining_tokens} tokens outstanding")
        future.set_exception(error)
        return True

    def close(self, error: Exception):
        """Fail the in-flight request and every queued one, and refuse new submissions."""
        with self.lock:
            self.closed = True
            queued = list(self.queue)
            self.queue.clear()

            current = self.current
            settle_current = current is not None and self._detach(current)

        if settle_current:
            current.future.set_exception(error)

        for request in queued:
            if request.future.set_running_or_notify_cancel():
                request.future.set_exception(error)

        if settle_current or queued:
            print(f"      [WARNING] Abandoned {len(queued) + int(settle_current)} pending requests: {error}")
