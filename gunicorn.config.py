# gunicorn.config.py
# Start command: gunicorn -c gunicorn.config.py run:app

import os

workers = int(os.getenv("WEB_CONCURRENCY", 2))

# Threaded workers: a long audio stream occupies one thread, while the
# worker's heartbeat keeps running so it is not killed mid-playback.
worker_class = "gthread"
threads = int(os.getenv("GUNICORN_THREADS", 8))

bind = f"0.0.0.0:{os.getenv('PORT', '3000')}"
timeout = 120          # Allow up to 120s for slow external APIs
keepalive = 5
max_requests = 1000    # Recycle workers to bound memory growth
max_requests_jitter = 100
preload_app = True
accesslog = "-"        # Log to stdout
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()
