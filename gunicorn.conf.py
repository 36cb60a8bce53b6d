"""
Gunicorn configuration for the job portal API
Run with: gunicorn app.main:app -c gunicorn.conf.py
"""
import multiprocessing
import os

# Server socket
bind = os.getenv("GUNICORN_BIND", f"0.0.0.0:{os.getenv('PORT', '8000')}")
backlog = 2048

# Worker processes
# Formula: (2 * CPU cores) + 1, capped by GUNICORN_WORKERS when set
workers = int(os.getenv("GUNICORN_WORKERS", multiprocessing.cpu_count() * 2 + 1))
worker_class = "uvicorn.workers.UvicornWorker"

# Worker lifecycle
max_requests = 1000  # Restart worker after 1000 requests
max_requests_jitter = 100  # Avoid all workers restarting at once

# Timeouts
timeout = 30
keepalive = 5
graceful_timeout = 30

# Process naming
proc_name = "job_portal_api"

# Server mechanics
daemon = False
pidfile = None
umask = 0

# Logging; application logs go through structlog on stdout
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()
access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'


# Server hooks
def on_starting(server):
    """Called just before the master process is initialized."""
    server.log.info("Starting job portal API")


def when_ready(server):
    """Called just after the server is started."""
    server.log.info("Gunicorn server is ready. Spawning workers")


def worker_abort(worker):
    """Called when a worker is aborted (usually a timeout)."""
    worker.log.info("Worker received SIGABRT signal")
