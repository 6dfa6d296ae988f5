import os

# Bind & workers
bind = os.getenv("GUNICORN_BIND", "0.0.0.0:8000")
# Pending authorizations live in-process unless REDIS_URL is set; a second
# worker would not see the states issued by the first.
workers = int(os.getenv("GUNICORN_WORKERS", "2" if os.getenv("REDIS_URL") else "1"))
threads = int(os.getenv("GUNICORN_THREADS", "8"))
worker_class = "gthread"
timeout = 60
graceful_timeout = 30
keepalive = 5

# Build the app after forking so each worker starts its own sweeper thread
preload_app = False
wsgi_app = "passport:create_app()"

# Logs to stdout/stderr (collected by Docker)
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()

# Honour proxy headers
forwarded_allow_ips = "*"
proxy_protocol = False
