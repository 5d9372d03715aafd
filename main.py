# Archivo: main.py

from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware

from core.config import settings
from core.database import connect_to_db, close_db_connection
from modules.bonos import router as bonos_router

# Inicialización de la app
import logging
from logging.handlers import RotatingFileHandler

# Configurar Logging Global
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    handlers=[
        logging.StreamHandler(), # Consola
        RotatingFileHandler(settings.LOG_FILE, maxBytes=5*1024*1024, backupCount=3) # Archivo 5MB
    ]
)

app = FastAPI(title="Motor de Bonos", on_startup=[connect_to_db], on_shutdown=[close_db_connection])

# Middleware de Sesión (cookie compartida con el servicio de autenticación)
app.add_middleware(
    SessionMiddleware,
    secret_key=settings.SECRET_KEY,
    max_age=86400,  # 24 horas en segundos
    same_site="lax",
    https_only=not settings.DEBUG_MODE
)

# Registrar Routers Modulares
app.include_router(bonos_router.router)


@app.get("/health", tags=["Home"])
async def health():
    """Chequeo liviano para el balanceador (no toca la BD)."""
    return {"status": "ok", "app": app.title}

# Si quisieras levantar el servidor: uvicorn main:app --reload
