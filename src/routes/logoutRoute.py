# routes/logoutRoute.py

from fastapi import APIRouter, Request
from controllers.authController import logout_user_api

router = APIRouter()

@router.post("/logout", tags=["auth"])
async def logout(request: Request):
    """
    API endpoint to log out the current user.
    Invalidates the session behind the auth-token cookie and clears the cookie.
    """
    return await logout_user_api(request)
