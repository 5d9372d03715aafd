"""
Gunicorn configuration for the bonus service (uvicorn workers).
Las corridas masivas son cortas pero abren varias conexiones del pool por worker.
"""
import os

# Worker configuration
# Cada worker crea su propio pool asyncpg: workers * DB_POOL_MAX_SIZE no debe
# superar el límite de conexiones de Supabase
workers = int(os.getenv("GUNICORN_WORKERS", "2"))

# Worker class: UvicornWorker para ASGI
worker_class = "uvicorn.workers.UvicornWorker"

# Bind address
port = os.getenv("PORT", "8000")
bind = f"0.0.0.0:{port}"

# Timeouts
# Una corrida masiva de todo el padrón puede tardar más que un request normal
timeout = 120
keepalive = 5

# Graceful shutdown
graceful_timeout = 30

# Worker lifecycle
max_requests = 1000
max_requests_jitter = 50

# Logging
accesslog = "-"
errorlog = "-"
loglevel = os.getenv("LOG_LEVEL", "info").lower()

access_log_format = '%(h)s %(l)s %(u)s %(t)s "%(r)s" %(s)s %(b)s "%(f)s" "%(a)s" %(D)s'

# Preload deshabilitado: el pool async se crea por worker en el startup
preload_app = False

backlog = 100

worker_tmp_dir = "/tmp"

def on_starting(server):
    """Hook ejecutado al iniciar Gunicorn."""
    import logging
    logger = logging.getLogger("gunicorn.error")
    logger.info(f"[GUNICORN] Iniciando Gunicorn con {workers} workers")

def worker_int(worker):
    """Hook ejecutado cuando worker recibe SIGINT (Ctrl+C)."""
    import logging
    logger = logging.getLogger("gunicorn.error")
    logger.info(f"[GUNICORN] Worker {worker.pid} interrumpido, cerrando pool de conexiones...")

def post_worker_init(worker):
    """Hook ejecutado después de inicializar cada worker."""
    import logging
    logger = logging.getLogger("gunicorn.error")
    logger.info(f"[GUNICORN] Worker {worker.pid} inicializado correctamente")
