"""Guardia de autenticación para rutas protegidas (token Bearer)."""

import logging
from typing import Optional

from fastapi import Depends, Header, Request

from .context import AppContext, get_context
from .errors import Unauthorized
from .utils import InvalidToken, decode_access_token

logger = logging.getLogger(__name__)


def get_current_user_id(
    request: Request,
    authorization: Optional[str] = Header(None),
    ctx: AppContext = Depends(get_context),
) -> str:
    """
    Dependencia que exige 'Authorization: Bearer <token>'.
    Inyecta el user_id en request.state y lo devuelve al endpoint.
    Cada camino termina en un resultado: user_id o Unauthorized.
    """
    scheme, _, token = (authorization or "").partition(" ")
    token = token.strip()
    if scheme != "Bearer" or not token:
        logger.warning(f"Petición sin token Bearer a {request.url.path}")
        raise Unauthorized("Not authorized, no token")

    try:
        user_id = decode_access_token(token, ctx.settings.jwt_secret)
    except InvalidToken:
        # ExpiredToken también cae aquí
        raise Unauthorized("Not authorized, token failed")

    request.state.user_id = user_id
    return user_id
