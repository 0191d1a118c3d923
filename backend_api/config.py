# backend_api/config.py
from typing import List, Optional

from pydantic import EmailStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Configuración de la aplicación.
    Se lee de variables de entorno o de un fichero `.env`.
    """

    APP_NAME: str = "Backend API"
    APP_VERSION: str = "1.0.0"

    # Base de datos
    DATABASE_URL: str = "sqlite:///./backend_api.db"
    DB_ECHO: bool = False

    # Tokens (JWT)
    JWT_SECRET: str = "cambia-esta-clave-en-produccion-cambia-esta-clave-en-produccion-0000"
    JWT_ALGORITHM: str = "HS512"
    JWT_EXPIRATION_MINUTES: int = 1440

    # Coste de bcrypt (en tests se baja para ir rápido)
    BCRYPT_ROUNDS: int = 12

    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    # Cuenta de administrador opcional que se crea al arrancar
    ADMIN_USERNAME: Optional[str] = None
    ADMIN_EMAIL: Optional[EmailStr] = None
    ADMIN_PASSWORD: Optional[str] = None

    model_config = SettingsConfigDict(env_file=".env")


settings = Settings()
