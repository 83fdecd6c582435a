"""
Gunicorn configuration for the habit tracker API.
Everything is driven from environment variables for container deployment.
"""

from __future__ import annotations

import logging
import os

wsgi_app = os.environ.get("GUNICORN_WSGI_APP", "habit_tracker.wsgi:app")

bind = os.environ.get("GUNICORN_BIND", "0.0.0.0:3001")

# sqlite allows a single writer at a time; keep the process count small and
# let threads absorb the read traffic.
worker_class = os.environ.get("GUNICORN_WORKER_CLASS", "gthread")
workers = int(os.environ.get("GUNICORN_WORKERS", "2"))
threads = int(os.environ.get("GUNICORN_THREADS", "4"))
max_requests = int(os.environ.get("GUNICORN_MAX_REQUESTS", "5000"))
max_requests_jitter = int(os.environ.get("GUNICORN_MAX_REQUESTS_JITTER", "500"))

timeout = int(os.environ.get("GUNICORN_TIMEOUT", "30"))
graceful_timeout = int(os.environ.get("GUNICORN_GRACEFUL_TIMEOUT", "30"))
keepalive = int(os.environ.get("GUNICORN_KEEPALIVE", "5"))

accesslog = os.environ.get("GUNICORN_ACCESSLOG", "-")
errorlog = os.environ.get("GUNICORN_ERRORLOG", "-")
loglevel = os.environ.get("GUNICORN_LOGLEVEL", "info")
capture_output = True

proc_name = os.environ.get("GUNICORN_PROC_NAME", "habit-tracker")
preload_app = os.environ.get("GUNICORN_PRELOAD", "false").lower() in ("1", "true", "yes")


def when_ready(server):
    logging.getLogger(__name__).info(
        "habit tracker ready on %s (workers=%s, threads=%s)", bind, workers, threads
    )


def worker_abort(worker):
    logging.getLogger(__name__).warning("Worker %s timed out (>%ss), aborting", worker.pid, timeout)
