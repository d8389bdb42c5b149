"""Transport to the analysis host: JSON requests over HTTP.

A request `{"method": ..., "data": ...}` is posted to `<host_url>/api/<method>` on a
background thread. The host answers with `{"status": ..., "data": ...}`.

Responses are not delivered on the background thread. They are queued, and `poll`
(called once per frame by the app's render loop) hands them to their callbacks on
the GUI thread, so callbacks may freely touch GUI state.

When the owner of a request goes away (e.g. the panel that asked for it is closed),
call `discard(owner)`: requests that have not started are cancelled, and responses
that arrive later for that owner are dropped.
"""

__all__ = ["HostTransport", "TransportError"]

import logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

import concurrent.futures
import threading
from typing import Any, Callable, Dict, List, Optional, Tuple

import requests

from unpythonic.env import env as envcls

from . import bgtask
from .logbook import LogBook


class TransportError(Exception):
    """A request to the analysis host failed."""


def yell_on_error(response: requests.Response) -> None:
    if response.status_code != 200:
        logger.error(f"yell_on_error: Analysis host returned error: {response.status_code} {response.reason}. Content of error response follows.")
        logger.error(response.text)
        raise TransportError(f"While calling analysis host: HTTP {response.status_code} {response.reason}")


class HostTransport:
    def __init__(self,
                 host_url: str,
                 logbook: Optional[LogBook] = None,
                 executor: Optional[concurrent.futures.Executor] = None,
                 timeout: float = 10.0,
                 headers: Optional[Dict[str, str]] = None):
        """Connect to the analysis host at `host_url` (e.g. "http://127.0.0.1:5200").

        `logbook`: Records every request ("CREQ"), response ("RECV") and failure ("CERR").
        `executor`: Runs the requests. If not provided, one is created.
        `timeout`: Seconds, network timeout per request.
        `headers`: Extra HTTP headers sent with each request.
        """
        self.host_url = host_url.rstrip("/")
        self.logbook = logbook if logbook is not None else LogBook()
        if executor is None:
            executor = concurrent.futures.ThreadPoolExecutor()
        self.task_manager = bgtask.TaskManager(name="host_transport",
                                               mode="concurrent",
                                               executor=executor)
        self.timeout = timeout
        self.headers = dict(headers) if headers is not None else {}

        self._queue: List[Tuple[Any, Callable, Any]] = []  # (owner, callback, response data)
        self._queue_lock = threading.Lock()

    def url_for(self, method: str) -> str:
        return f"{self.host_url}/api/{method}"

    def request(self,
                method: str,
                data: Any = None,
                owner: Any = None,
                on_response: Optional[Callable[[Any], None]] = None,
                no_response: bool = False):
        """Send a request in the background. Return the task name.

        `method`: Name of the host API method.
        `data`: JSON-serializable payload.
        `owner`: Who asked; see `discard`.
        `on_response`: Called on the GUI thread (from `poll`) with the response data, `{"status": ..., "data": ...}`.
                       Not called if the request fails.
        `no_response`: Fire and forget: don't read the response body, and don't call `on_response`.
        """
        if not method:
            raise ValueError("HostTransport.request: `method` must be a non-empty string")
        self.logbook.requested(method, data)
        payload = {"method": method, "data": data}

        def run(task_env):
            if task_env.cancelled:
                return
            try:
                response = requests.post(self.url_for(method),
                                         json=payload,
                                         headers=self.headers,
                                         timeout=self.timeout)
                yell_on_error(response)
                if no_response:
                    return
                content = response.json()
            except (requests.RequestException, TransportError, ValueError) as exc:  # ValueError: response body is not JSON
                logger.error(f"HostTransport.request: '{method}' failed: {type(exc)}: {exc}")
                self.logbook.error(f"{method}: {exc}")
                return
            status = content.get("status", "ok") if isinstance(content, dict) else "ok"
            self.logbook.received(status, content)
            if on_response is None:
                return
            with self._queue_lock:  # `discard` sets the flag before it filters the queue
                if task_env.cancelled:
                    logger.info(f"HostTransport.request: '{method}': owner {owner} is gone, dropping the response.")
                    return
                self._queue.append((owner, on_response, content))

        return self.task_manager.submit(run, envcls(), owner=owner)

    def poll(self) -> int:
        """Deliver the queued responses to their callbacks. Call this once per frame, on the GUI thread.

        Return the number of callbacks called.
        """
        with self._queue_lock:
            queue, self._queue = self._queue, []
        n = 0
        for owner, callback, content in queue:
            callback(content)
            n += 1
        return n

    def discard(self, owner: Any) -> None:
        """Cancel the requests of `owner`, and drop its responses, both queued and in flight."""
        if owner is None:
            return
        n = self.task_manager.cancel_owned(owner)
        with self._queue_lock:
            self._queue = [item for item in self._queue if item[0] is not owner]
        logger.debug(f"HostTransport.discard: {owner}: cancelled {n} queued request(s).")

    def shutdown(self, wait: bool = False) -> None:
        """Cancel all requests. Call at app exit."""
        self.task_manager.clear(wait=wait)
        with self._queue_lock:
            self._queue.clear()
