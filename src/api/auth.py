# src/api/auth.py
import secrets
from typing import Optional

from fastapi import Header, Request

UNAUTHORIZED_MESSAGE = "Unauthorized"


class AuthError(Exception):
    """Credencial ausente ou diferente do segredo do relay."""


def is_authorized(authorization: Optional[str], relay_secret: str) -> bool:
    # segredo não configurado: ninguém passa
    if not authorization or not relay_secret:
        return False
    expected = f"Bearer {relay_secret}"
    return secrets.compare_digest(authorization.encode("utf-8"), expected.encode("utf-8"))


def require_relay_token(request: Request, authorization: Optional[str] = Header(None)):
    """Dependência FastAPI: barra a requisição antes do orquestrador."""
    settings = request.app.state.settings
    if not is_authorized(authorization, settings.relay_secret):
        raise AuthError()
