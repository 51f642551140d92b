"""Configuración del servicio leída desde variables de entorno (.env)."""

import os
import logging
from dataclasses import dataclass
from typing import Optional
from urllib.parse import urlparse

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

DEFAULT_MONGO_URI = "mongodb://localhost:27017/pms"
DEFAULT_DB_NAME = "pms"
INSECURE_JWT_SECRET = "clave_secreta_insegura_por_defecto_cambiar_urgentemente"


def configure_logging(level: str = "INFO") -> None:
    """Configura el logger raíz con el formato común del servicio."""
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)


def _db_name_from_uri(uri: str) -> Optional[str]:
    path = urlparse(uri).path.lstrip("/")
    return path or None


@dataclass(frozen=True)
class Settings:
    """Valores de configuración, cargados una sola vez al arrancar."""
    port: int = 5001
    host: str = "0.0.0.0"
    mongo_uri: str = DEFAULT_MONGO_URI
    mongo_db_name: str = DEFAULT_DB_NAME
    mongo_timeout_ms: int = 5000
    jwt_secret: str = INSECURE_JWT_SECRET
    payment_delay_seconds: float = 1.5
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Construye la configuración desde el entorno.

        Lanza ValueError si un valor numérico no es válido.
        """
        load_dotenv()

        mongo_uri = os.getenv("MONGO_URI", DEFAULT_MONGO_URI)
        db_name = os.getenv("MONGO_DB_NAME") or _db_name_from_uri(mongo_uri) or DEFAULT_DB_NAME

        jwt_secret = os.getenv("JWT_SECRET")
        if not jwt_secret:
            logger.warning("JWT_SECRET no está definida en las variables de entorno. Usando clave insegura por defecto para desarrollo.")
            jwt_secret = INSECURE_JWT_SECRET

        return cls(
            port=int(os.getenv("PORT", 5001)),
            host=os.getenv("HOST", "0.0.0.0"),
            mongo_uri=mongo_uri,
            mongo_db_name=db_name,
            mongo_timeout_ms=int(os.getenv("MONGO_TIMEOUT_MS", 5000)),
            jwt_secret=jwt_secret,
            payment_delay_seconds=float(os.getenv("PAYMENT_DELAY_SECONDS", 1.5)),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
