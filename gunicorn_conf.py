import multiprocessing
import os

# Gunicorn config
bind = os.environ.get("GUNICORN_BIND", "0.0.0.0:8000")  # Match this port in your ALB target group
workers = int(os.environ.get("GUNICORN_WORKERS", multiprocessing.cpu_count()))
worker_class = "uvicorn.workers.UvicornWorker"
wsgi_app = "friendship_api.main:app"
loglevel = os.environ.get("GUNICORN_LOGLEVEL", "info")
accesslog = os.environ.get("GUNICORN_ACCESSLOG", "-")
errorlog = os.environ.get("GUNICORN_ERRORLOG", "-")
