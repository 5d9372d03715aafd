import os
from dotenv import load_dotenv
from pydantic_settings import BaseSettings

load_dotenv()

class Settings(BaseSettings):
    # --- Configuración de Base de Datos (Supabase/Postgres) ---
    SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")

    DB_PASSWORD: str = os.getenv("DB_PASSWORD", "")
    DB_USER: str = os.getenv("DB_USER", "postgres")

    # Construcción de URL para asyncpg
    DB_URL_ASYNC: str = f"postgresql://{DB_USER}:{DB_PASSWORD}@{SUPABASE_URL.replace('https://', '').replace('http://', '')}:5432/postgres"

    DB_POOL_MIN_SIZE: int = int(os.getenv("DB_POOL_MIN_SIZE", "5"))
    DB_POOL_MAX_SIZE: int = int(os.getenv("DB_POOL_MAX_SIZE", "20"))

    # --- Configuración de Seguridad y Sesión ---
    # La cookie de sesión la escribe el servicio de autenticación; compartimos la llave.
    SECRET_KEY: str = os.getenv("SECRET_KEY", "tu_super_secret_key_temporal_dev")
    DEBUG_MODE: bool = os.getenv("DEBUG_MODE", "false").lower() == "true"

    # --- Logging ---
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE: str = os.getenv("LOG_FILE", "system_errors.log")

    # Zona horaria usada para decidir "hoy" cuando el caller no envía as_of
    TIMEZONE: str = os.getenv("TIMEZONE", "America/Argentina/Buenos_Aires")

    # --- Motor de Bonos ---
    # evaluated_subset: promedia solo sub-objetivos evaluados
    # all_required: el objetivo principal cuenta solo con todos sus sub-objetivos evaluados
    BONUS_SUBOBJECTIVE_POLICY: str = os.getenv("BONUS_SUBOBJECTIVE_POLICY", "evaluated_subset")
    # months: meses completos desde el mes de ingreso | days: días calendario trabajados
    BONUS_PRORATION_MODE: str = os.getenv("BONUS_PRORATION_MODE", "months")
    # Cálculos simultáneos en una corrida masiva (acotado por el pool de conexiones)
    BONUS_BATCH_CONCURRENCY: int = int(os.getenv("BONUS_BATCH_CONCURRENCY", "10"))

settings = Settings()
