"""Gunicorn config for the Alcohol Analytics API."""
import os

# Bind to the platform's PORT or default 8000
bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

# Uvicorn async workers, each loading its own read-only DataModel at startup.
# Tune via WEB_CONCURRENCY env var.
worker_class = "uvicorn.workers.UvicornWorker"
workers = int(os.environ.get("WEB_CONCURRENCY", "2"))

# View computations are small; exports of the full series stay well under this
timeout = 60

graceful_timeout = 30

# Keep-alive must exceed the proxy keep-alive (default 60s)
keepalive = 65

# Logging
accesslog = "-"
errorlog = "-"
loglevel = os.environ.get("LOG_LEVEL", "info")

# Entry point: gunicorn -c gunicorn.conf.py alcohol_analytics.main:app
wsgi_app = "alcohol_analytics.main:app"
