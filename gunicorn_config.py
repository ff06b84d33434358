"""
Gunicorn configuration for the budget tracker API.

    gunicorn budget_tracker.wsgi:application -c gunicorn_config.py
"""
import multiprocessing
import os

# Server socket
bind = f"0.0.0.0:{os.getenv('API_PORT', '8000')}"
backlog = int(os.getenv('GUNICORN_BACKLOG', '2048'))

# Worker processes: one request per worker at a time, no shared in-process state
workers = int(os.getenv('GUNICORN_WORKERS', multiprocessing.cpu_count() * 2 + 1))
worker_class = 'sync'
timeout = int(os.getenv('GUNICORN_TIMEOUT', '30'))
graceful_timeout = int(os.getenv('GUNICORN_GRACEFUL_TIMEOUT', '30'))
keepalive = int(os.getenv('GUNICORN_KEEPALIVE', '2'))
max_requests = int(os.getenv('GUNICORN_MAX_REQUESTS', '1000'))
max_requests_jitter = int(os.getenv('GUNICORN_MAX_REQUESTS_JITTER', '50'))

# Logging
accesslog = os.getenv('GUNICORN_ACCESS_LOG', '-')  # '-' means stdout
errorlog = os.getenv('GUNICORN_ERROR_LOG', '-')  # '-' means stderr
loglevel = os.getenv('GUNICORN_LOG_LEVEL', 'info')
access_log_format = '%(h)s %(u)s %(t)s "%(r)s" %(s)s %(b)s %(D)s'

proc_name = 'budget_tracker_api'
preload_app = True
raw_env = [
    f"DJANGO_SETTINGS_MODULE={os.getenv('DJANGO_SETTINGS_MODULE', 'budget_tracker.settings.prod')}",
]


def when_ready(server):
    server.log.info("Budget tracker API ready, spawning workers")


def worker_abort(worker):
    worker.log.warning("Worker %s aborted (timeout)", worker.pid)
