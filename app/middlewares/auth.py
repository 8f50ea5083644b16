import logging
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.config import settings
from app.core.errors import UnauthenticatedError
from app.core.security import verify_supabase_token, is_api_key
from app.db.session import get_session
from app.services.api_keys import authenticate_api_key

logger = logging.getLogger(__name__)

def _bearer_token(request: Request) -> str | None:
    authorization = request.headers.get("authorization", "")
    if authorization.lower().startswith("bearer "):
        return authorization.split(" ", 1)[1].strip() or None
    return None

async def current_user(request: Request, session: AsyncSession = Depends(get_session)) -> dict:
    """Resolve the caller to ``{"sub", "email", "is_api_key"}`` or raise 401.

    A bearer token carrying the API key prefix is looked up by hash; any
    other bearer token, or the Supabase session cookie, is verified as a
    Supabase JWT.
    """
    token = _bearer_token(request)

    if token and is_api_key(token):
        user_id = await authenticate_api_key(session, token)
        if not user_id:
            raise UnauthenticatedError()
        return {"sub": user_id, "email": None, "is_api_key": True}

    if not token:
        token = request.cookies.get(settings.session_cookie_name)
    if not token:
        raise UnauthenticatedError()

    try:
        claims = await verify_supabase_token(token)
    except Exception as e:
        logger.info("Rejected session token: %s", e)
        raise UnauthenticatedError()
    if not claims.get("sub"):
        raise UnauthenticatedError()
    # devolvemos claims mínimos
    return {"sub": claims["sub"], "email": claims.get("email"), "is_api_key": False}
