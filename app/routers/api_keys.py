# app/routers/api_keys.py
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from app.db.session import get_session
from app.middlewares.auth import current_user
from app.schemas.api_key import ApiKeyInfoOut, ApiKeyCreatedOut
from app.schemas.common import MessageOut
from app.services.api_keys import get_key_info, regenerate_key, delete_key

router = APIRouter(prefix="/api-keys", tags=["api-keys"])

@router.get("", response_model=ApiKeyInfoOut, response_model_exclude_none=True)
async def get_api_key_route(
    user = Depends(current_user),
    session: AsyncSession = Depends(get_session),
):
    return await get_key_info(session, user["sub"])

@router.post("", response_model=ApiKeyCreatedOut)
async def regenerate_api_key_route(
    user = Depends(current_user),
    session: AsyncSession = Depends(get_session),
):
    # el secreto en claro solo se devuelve acá
    secret = await regenerate_key(session, user["sub"])
    return {"api_key": secret}

@router.delete("", response_model=MessageOut)
async def delete_api_key_route(
    user = Depends(current_user),
    session: AsyncSession = Depends(get_session),
):
    await delete_key(session, user["sub"])
    return {"message": "API key deleted successfully"}
