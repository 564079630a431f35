# routes/meRoute.py

from fastapi import APIRouter, Request
from controllers.authController import current_user_api

router = APIRouter()

@router.get("/me", tags=["auth"])
async def me(request: Request):
    """
    Return the user that owns the auth-token cookie.
    """
    return await current_user_api(request)
