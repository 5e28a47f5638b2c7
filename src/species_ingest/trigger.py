"""
HTTP trigger for background sync runs.

Any request, whatever its method or path, is answered immediately with
``202 Accepted``; the sync then runs on a background thread.  The caller
never sees the outcome: errors from the run are logged and stop there.

One server runs at most one sync at a time.  A trigger that arrives while a
run is in progress is still acknowledged, but starts nothing.
"""

from __future__ import annotations

import threading
import traceback
from collections.abc import Callable
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

ACK_MESSAGE = "Updating one random taxon in background..."


def run_in_background(
    runner: Callable[[], object],
    lock: threading.Lock | None = None,
) -> threading.Thread | None:
    """
    Start ``runner`` on a daemon thread that never raises.

    With a ``lock``, the run only starts if the lock is free; the lock is held
    until the run finishes.  Returns None when the run was not started.
    """
    if lock is not None and not lock.acquire(blocking=False):
        print("Sync already in progress, trigger ignored")
        return None

    def _guarded() -> None:
        try:
            runner()
        except Exception as exc:  # noqa: BLE001
            print(f"Background task failed: {exc}")
            traceback.print_exc()
        finally:
            if lock is not None:
                lock.release()

    thread = threading.Thread(target=_guarded, name="taxon-sync", daemon=True)
    thread.start()
    return thread


class TriggerHandler(BaseHTTPRequestHandler):
    """Accepts every request and kicks off ``runner`` in the background."""

    runner: Callable[[], object]
    run_lock: threading.Lock

    def _content_length(self) -> int:
        try:
            return max(0, int(self.headers.get("Content-Length") or 0))
        except ValueError:
            return 0

    def _accept(self, *, send_body: bool = True) -> None:
        # request payload is ignored, but must be read before replying
        length = self._content_length()
        if length:
            self.rfile.read(length)

        body = ACK_MESSAGE.encode()
        self.send_response(HTTPStatus.ACCEPTED)
        self.send_header("Content-Type", "text/plain; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        if send_body:
            self.wfile.write(body)
        self.wfile.flush()
        run_in_background(type(self).runner, type(self).run_lock)

    def do_HEAD(self) -> None:
        self._accept(send_body=False)

    do_GET = _accept
    do_POST = _accept
    do_PUT = _accept
    do_PATCH = _accept
    do_DELETE = _accept
    do_OPTIONS = _accept


def make_server(host: str, port: int, runner: Callable[[], object]) -> ThreadingHTTPServer:
    """Build a trigger server whose handler starts ``runner`` per request."""
    handler = type(
        "BoundTriggerHandler",
        (TriggerHandler,),
        {"runner": staticmethod(runner), "run_lock": threading.Lock()},
    )
    return ThreadingHTTPServer((host, port), handler)
