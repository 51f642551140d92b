"""Conexión a la base de datos MongoDB usando pymongo."""

import logging
from typing import Tuple

from pymongo import ASCENDING, MongoClient
from pymongo.collection import Collection
from pymongo.database import Database
from pymongo.errors import PyMongoError

from .config import Settings

logger = logging.getLogger(__name__)

USERS_COLLECTION = "users"


def connect(settings: Settings) -> Tuple[MongoClient, Database]:
    """
    Crea el cliente de MongoDB y verifica la conexión con un 'ping'.

    Si la base de datos no responde, registra el error y lo propaga para que
    el servicio no arranque sirviendo endpoints rotos.
    """
    client = MongoClient(settings.mongo_uri, serverSelectionTimeoutMS=settings.mongo_timeout_ms)
    try:
        client.admin.command("ping")
        logger.info("Conexión a MongoDB establecida exitosamente.")
    except PyMongoError as e:
        logger.error(f"Error al conectar con MongoDB: {e}", exc_info=True)
        client.close()
        raise
    return client, client[settings.mongo_db_name]


def ensure_indexes(collection: Collection) -> None:
    """Crea los índices únicos de email y username si no existen."""
    collection.create_index([("email", ASCENDING)], unique=True, name="user_email_uq")
    collection.create_index([("username", ASCENDING)], unique=True, name="user_username_uq")
    logger.info(f"Índices verificados/creados en la colección '{collection.name}'.")


def ping(db: Database) -> bool:
    """Health check de la base de datos."""
    try:
        db.command("ping")
        return True
    except PyMongoError as e:
        logger.warning(f"Ping a MongoDB fallido: {e}")
        return False
