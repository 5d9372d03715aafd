# Archivo: core/database.py (Conexión Asíncrona para FastAPI)

import asyncpg
import logging
from core.config import settings
from typing import AsyncIterator, Optional

logger = logging.getLogger("Database")

# Almacenamos el pool de conexiones globalmente
_connection_pool: Optional[asyncpg.Pool] = None

async def connect_to_db():
    """Inicializa el pool de conexiones al inicio de la aplicación (startup)."""
    global _connection_pool
    if not _connection_pool:
        try:
            logger.info("Inicializando conexión a Supabase (asyncpg)...")

            _connection_pool = await asyncpg.create_pool(
                settings.DB_URL_ASYNC,
                min_size=settings.DB_POOL_MIN_SIZE,
                max_size=settings.DB_POOL_MAX_SIZE,
                timeout=30 # segundos
            )
            logger.info("Pool de conexiones a Supabase creado exitosamente.")
        except Exception as e:
            # La app levanta igual; los endpoints responderán error hasta que haya pool.
            logger.critical(f"ERROR CRÍTICO al conectar a Supabase: {e!r}", exc_info=True)

async def close_db_connection():
    """Cierra el pool de conexiones al apagado de la aplicación (shutdown)."""
    global _connection_pool
    if _connection_pool:
        logger.info("Cerrando pool de conexiones de Supabase.")
        await _connection_pool.close()
        _connection_pool = None

def get_db_pool() -> asyncpg.Pool:
    """Dependencia para procesos que necesitan varias conexiones (corridas masivas)."""
    if not _connection_pool:
        raise RuntimeError("El pool de conexiones no está inicializado. Verifique el log de startup.")
    return _connection_pool

async def get_db_connection() -> AsyncIterator[asyncpg.Connection]:
    """Dependencia de FastAPI: presta una conexión del pool y la devuelve al terminar el request."""
    pool = get_db_pool()
    async with pool.acquire() as conn:
        yield conn
