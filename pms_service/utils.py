"""Funciones de utilidad para autenticación: hash de contraseñas y manejo de JWT."""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"

# Vida fija del token: 1 hora desde su emisión
ACCESS_TOKEN_EXPIRE_MINUTES = 60


class InvalidToken(Exception):
    """Token mal formado, con firma inválida o sin 'sub'."""


class ExpiredToken(InvalidToken):
    """Token válido cuya fecha de expiración ya pasó."""


pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verifica una contraseña plana contra un hash almacenado."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError) as e:
        # Hash corrupto o con formato desconocido
        logger.warning(f"No se pudo verificar la contraseña: {e}")
        return False


def get_password_hash(password: str) -> str:
    """Genera el hash de una contraseña plana usando bcrypt (sal aleatoria por llamada)."""
    return pwd_context.hash(password)


# --- Utilidades para Tokens JWT ---
def create_access_token(user_id: str, secret: str, expires_delta: Optional[timedelta] = None) -> str:
    """
    Genera un token de acceso JWT para el usuario indicado.

    Args:
        user_id: ID del usuario, se guarda en el claim 'sub'.
        secret: Clave de firma del servidor.
        expires_delta: Vida del token; por defecto ACCESS_TOKEN_EXPIRE_MINUTES.

    Returns:
        String del JWT codificado.
    """
    if expires_delta is None:
        expires_delta = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    now = datetime.now(timezone.utc)
    to_encode = {
        "sub": str(user_id),
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(to_encode, secret, algorithm=ALGORITHM)


def decode_access_token(token: str, secret: str) -> str:
    """
    Decodifica y valida un token JWT.

    Returns:
        El ID de usuario contenido en 'sub'.

    Raises:
        ExpiredToken: si el token ya expiró.
        InvalidToken: si el token está mal formado, la firma no coincide o falta 'sub'.
    """
    try:
        payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
    except ExpiredSignatureError as e:
        logger.warning("Fallo en decodificación de token: El token ha expirado.")
        raise ExpiredToken(str(e)) from e
    except JWTError as e:
        logger.warning(f"Fallo en decodificación de token: {e}")
        raise InvalidToken(str(e)) from e

    user_id = payload.get("sub")
    if not user_id:
        logger.warning("Token sin claim 'sub'.")
        raise InvalidToken("Token payload has no 'sub'")
    return user_id
