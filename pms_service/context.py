"""Contexto de la aplicación: dependencias creadas una vez al arrancar."""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request
from pymongo import MongoClient
from pymongo.database import Database

from .config import Settings
from .db import USERS_COLLECTION, connect, ensure_indexes
from .errors import InternalError
from .models import UserStore
from .payments import PaymentGateway, SimulatedGateway

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    settings: Settings
    db: Database
    users: UserStore
    gateway: PaymentGateway
    client: Optional[MongoClient] = None

    @classmethod
    def build(cls, settings: Settings) -> "AppContext":
        """Conecta a MongoDB y arma el contexto. Falla si la base no responde."""
        client, db = connect(settings)
        collection = db[USERS_COLLECTION]
        ensure_indexes(collection)
        return cls(
            settings=settings,
            db=db,
            users=UserStore(collection),
            gateway=SimulatedGateway(settings.payment_delay_seconds),
            client=client,
        )

    def close(self) -> None:
        if self.client is not None:
            self.client.close()
            logger.info("Conexión a MongoDB cerrada.")


# --- Dependencias de FastAPI ---

def get_context(request: Request) -> AppContext:
    ctx = getattr(request.app.state, "ctx", None)
    if ctx is None:
        logger.error("El contexto de la aplicación no está inicializado.")
        raise InternalError("Service not initialized")
    return ctx


def get_user_store(ctx: AppContext = Depends(get_context)) -> UserStore:
    return ctx.users


def get_gateway(ctx: AppContext = Depends(get_context)) -> PaymentGateway:
    return ctx.gateway
