"""Adaptador de pasarela de pagos y su implementación simulada."""

import asyncio
import logging
import time
import uuid
from abc import ABC, abstractmethod

from pydantic import BaseModel

from .schemas import PaymentRequest

logger = logging.getLogger(__name__)


class GatewayError(Exception):
    """La pasarela rechazó o no pudo procesar el cargo."""


class PaymentConfirmation(BaseModel):
    transactionId: str
    amount: int | float | str
    status: str = "completed"


class PaymentGateway(ABC):
    """Interfaz que debe implementar cualquier pasarela real (Stripe, PayPal, ...)."""

    @abstractmethod
    async def charge(self, payment: PaymentRequest) -> PaymentConfirmation:
        """Realiza el cargo. Lanza GatewayError si falla."""


def generate_transaction_id() -> str:
    """ID de transacción basado en la hora actual, con sufijo aleatorio para que sea único por llamada."""
    return f"TXN_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"


class SimulatedGateway(PaymentGateway):
    """
    Simula una pasarela de pagos: espera 'delay_seconds' sin bloquear el
    event loop y devuelve una confirmación ficticia. No cobra nada ni guarda datos.
    """

    def __init__(self, delay_seconds: float = 1.5):
        self.delay_seconds = delay_seconds

    async def charge(self, payment: PaymentRequest) -> PaymentConfirmation:
        await asyncio.sleep(self.delay_seconds)
        logger.info(f"Procesando pago de {payment.cardHolderName} por {payment.amount} con tarjeta {payment.masked_card()}")
        return PaymentConfirmation(transactionId=generate_transaction_id(), amount=payment.amount)
