"""Endpoints de la API: cuentas de usuario y pagos."""

import logging

from fastapi import APIRouter, Depends, status

from . import schemas
from .context import AppContext, get_context, get_gateway, get_user_store
from .errors import BadRequest, Conflict, InternalError, NotFound, Unauthorized
from .models import DuplicateKey, User, UserStore
from .payments import PaymentGateway
from .security import get_current_user_id
from .utils import create_access_token, get_password_hash, verify_password

logger = logging.getLogger(__name__)

auth_router = APIRouter(prefix="/api/auth", tags=["Authentication"])
payment_router = APIRouter(prefix="/api", tags=["Payments"])

INVALID_CREDENTIALS = "Invalid email or password"


def _auth_payload(user: User, ctx: AppContext) -> dict:
    return {
        "id": user.id,
        "username": user.username,
        "email": user.email,
        "token": create_access_token(user.id, ctx.settings.jwt_secret),
    }


@auth_router.post("/signup", response_model=schemas.AuthResponse, status_code=status.HTTP_201_CREATED)
def register(
    user_in: schemas.UserCreate,
    users: UserStore = Depends(get_user_store),
    ctx: AppContext = Depends(get_context),
):
    """Registra un usuario nuevo y devuelve su perfil con un token recién emitido."""
    logger.info(f"Registration attempt for email: {user_in.email}")
    if users.find_by_email(user_in.email):
        logger.warning(f"Registration failed: Email {user_in.email} already exists.")
        raise Conflict("User already exists")

    try:
        user = users.create(
            username=user_in.username,
            email=user_in.email,
            password_hash=get_password_hash(user_in.password),
        )
    except DuplicateKey:
        # Username repetido, o carrera con otro registro del mismo email
        logger.warning(f"Registration failed: duplicate username or email for {user_in.email}.")
        raise Conflict("User already exists")

    return _auth_payload(user, ctx)


@auth_router.post("/login", response_model=schemas.AuthResponse)
def login(
    credentials: schemas.UserLogin,
    users: UserStore = Depends(get_user_store),
    ctx: AppContext = Depends(get_context),
):
    """
    Autentica por email y contraseña.
    El mismo mensaje de error para email inexistente y contraseña incorrecta.
    """
    logger.info(f"Login attempt for user: {credentials.email}")
    user = users.find_by_email(credentials.email)
    if not user or not verify_password(credentials.password, user.password):
        logger.warning(f"Login failed for user: {credentials.email}")
        raise Unauthorized(INVALID_CREDENTIALS)

    logger.info(f"Login successful for user_id: {user.id}")
    return _auth_payload(user, ctx)


@auth_router.put("/profile", response_model=schemas.ProfileResponse)
def update_profile(
    changes: schemas.ProfileUpdate,
    user_id: str = Depends(get_current_user_id),
    users: UserStore = Depends(get_user_store),
    ctx: AppContext = Depends(get_context),
):
    """Actualiza los campos enviados del perfil y emite un token nuevo."""
    user = users.find_by_id(user_id)
    if user is None:
        logger.warning(f"Usuario con ID {user_id} no encontrado.")
        raise NotFound("User not found")

    for field in ("username", "email", "firstName", "lastName", "phoneNumber"):
        value = getattr(changes, field)
        if value:
            setattr(user, field, value)
    if changes.password:
        user.password = get_password_hash(changes.password)

    try:
        users.save(user)
    except DuplicateKey:
        logger.warning(f"Actualización rechazada para {user_id}: email o username ya en uso.")
        raise Conflict("Email or username already in use")

    logger.info(f"Perfil actualizado para user_id: {user.id}")
    payload = _auth_payload(user, ctx)
    payload.update(
        firstName=user.firstName,
        lastName=user.lastName,
        phoneNumber=user.phoneNumber,
    )
    return payload


@auth_router.get("/logout", response_model=schemas.MessageResponse)
def logout():
    """El logout con JWT es del lado del cliente: solo se confirma."""
    return {"message": "User logged out (token removed client-side)"}


@payment_router.post("/payment", response_model=schemas.PaymentResponse)
async def process_payment(
    payment: schemas.PaymentRequest,
    user_id: str = Depends(get_current_user_id),
    gateway: PaymentGateway = Depends(get_gateway),
):
    """Procesa un pago simulado. Los datos de tarjeta no se guardan."""
    if not payment.is_complete():
        logger.warning(f"Pago rechazado para user_id {user_id}: faltan datos.")
        raise BadRequest("Missing payment details.")

    try:
        confirmation = await gateway.charge(payment)
    except Exception as e:
        logger.error(f"Payment processing error for user_id {user_id}: {e}", exc_info=True)
        raise InternalError("Payment failed. Please try again.")

    logger.info(f"Pago completado para user_id {user_id}: {confirmation.transactionId}")
    return {
        "message": "Payment processed successfully!",
        "transactionId": confirmation.transactionId,
        "amount": confirmation.amount,
        "status": confirmation.status,
    }
