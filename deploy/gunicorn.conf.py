"""
Gunicorn configuration for personalsystems.
Run with: gunicorn -c deploy/gunicorn.conf.py personalsystems.wsgi:app
"""

from __future__ import annotations

import logging
import multiprocessing
import os

bind = os.environ.get("GUNICORN_BIND", f"0.0.0.0:{os.environ.get('PORT', '5000')}")

# gthread worker class: threading-based, suits the I/O-bound API and AI proxy calls
worker_class = os.environ.get("GUNICORN_WORKER_CLASS", "gthread")
workers = int(os.environ.get("GUNICORN_WORKERS", str(min(multiprocessing.cpu_count() * 2 + 1, 8))))
threads = int(os.environ.get("GUNICORN_THREADS", "4"))
max_requests = int(os.environ.get("GUNICORN_MAX_REQUESTS", "5000"))
max_requests_jitter = int(os.environ.get("GUNICORN_MAX_REQUESTS_JITTER", "500"))

# Completion calls can take AI_TIMEOUT_SECONDS; leave headroom above it
timeout = int(os.environ.get("GUNICORN_TIMEOUT", "60"))
graceful_timeout = int(os.environ.get("GUNICORN_GRACEFUL_TIMEOUT", "30"))
keepalive = int(os.environ.get("GUNICORN_KEEPALIVE", "5"))

accesslog = os.environ.get("GUNICORN_ACCESSLOG", "-")  # stdout
errorlog = os.environ.get("GUNICORN_ERRORLOG", "-")    # stderr
loglevel = os.environ.get("GUNICORN_LOGLEVEL", "info")
capture_output = True
access_log_format = os.environ.get(
    "GUNICORN_ACCESS_LOG_FORMAT",
    '{"timestamp": "%(t)s", "remote": "%(h)s", "request": "%(r)s", '
    '"status": %(s)s, "bytes": %(b)s, "response_time": %(D)s}',
)

preload_app = os.environ.get("GUNICORN_PRELOAD", "false").lower() in ("1", "true", "yes")
forwarded_allow_ips = os.environ.get("GUNICORN_FORWARDED_ALLOW_IPS", "*")
proc_name = os.environ.get("GUNICORN_PROC_NAME", "personalsystems")


def when_ready(server):
    logging.getLogger(__name__).info(
        f"Gunicorn ready on {bind}: workers={workers}, threads={threads}, timeout={timeout}s"
    )


def worker_abort(worker):
    """Called when a worker is timed out and is being replaced."""
    logging.getLogger(__name__).warning(f"Worker {worker.pid} timed out (>{timeout}s), aborting")
