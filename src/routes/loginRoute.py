# routes/loginRoute.py

from fastapi import APIRouter, Request
from controllers.authController import login_user_api, demo_credentials_api

router = APIRouter()

@router.post("/login", tags=["auth"])
async def login(request: Request):
    """
    Expects a JSON body {"username", "password"}; sets the auth-token cookie on success.
    """
    return await login_user_api(request)


@router.get("/login", tags=["auth"])
async def demo_credentials():
    return await demo_credentials_api()
