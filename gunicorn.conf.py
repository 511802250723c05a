# gunicorn.conf.py
import os
import logging
import sys

wsgi_app = "app:create_app()"

# Configure logging to stdout
accesslog = '-'
errorlog = '-'
loglevel = 'info'

port = os.getenv('PORT', '8080')
bind = f"0.0.0.0:{port}"

# Reader sessions live in process memory: one worker, many threads
workers = 1
threads = int(os.getenv('GUNICORN_THREADS', 8))
worker_class = "gthread"


def on_starting(server):
    logger = logging.getLogger('gunicorn.error')
    logger.setLevel(logging.INFO)
    logger.addHandler(logging.StreamHandler(sys.stdout))
    logger.info(f"Starting gunicorn with {workers} worker / {threads} threads on port {port}")


timeout = 60
keepalive = 30
graceful_timeout = 30

proc_name = "bible_reader"
default_proc_name = "bible_reader"
