"""Gunicorn config for container deployment."""
import os

# Bind to the platform's PORT or default 8000
bind = f"0.0.0.0:{os.environ.get('PORT', '8000')}"

# One worker: the drill-down position is held in process memory, so every
# request from the session must reach the same navigator.
worker_class = "uvicorn.workers.UvicornWorker"
workers = 1

wsgi_app = "sales_drilldown.main:app"

timeout = 30
graceful_timeout = 30
keepalive = 65

# Logging
accesslog = "-"
errorlog = "-"
loglevel = "info"
