# gunicorn.conf.py
# gunicorn "filedrop.main:create_app()" -c gunicorn.conf.py
import os

bind = os.getenv("BIND_ADDRESS", "0.0.0.0:3000")
workers = int(os.getenv("WEB_CONCURRENCY", "2"))  # schaalbaar via env
worker_class = "uvicorn.workers.UvicornWorker"
preload_app = False
# uploads mogen tot een uur duren, de app bewaakt zelf de deadline
timeout = int(float(os.getenv("UPLOAD_TIMEOUT_SECONDS", "3600"))) + 60
graceful_timeout = 30
keepalive = 5
accesslog = "-"
errorlog = "-"
loglevel = "info"
