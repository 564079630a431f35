# controllers/authController.py

import logging
import os
from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field, ValidationError

from constants import SESSION_COOKIE_NAME, SESSION_MAX_AGE
from services import sessionService

logger = logging.getLogger("auth")
logger.setLevel(logging.INFO)


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    password: str = Field(..., min_length=1, max_length=100)


def _client_info(request: Request):
    ip_address = request.client.host if request.client else "unknown"
    user_agent = request.headers.get("user-agent", "unknown")
    return ip_address, user_agent


async def login_user_api(request: Request):
    ip_address, user_agent = _client_info(request)

    # 1) Validate the JSON body
    try:
        body = await request.json()
        credentials = LoginRequest.model_validate(body)
    except ValidationError as e:
        logger.warning(f"Login rejected from {ip_address}: validation failed")
        return JSONResponse(
            {
                "error": "Invalid input",
                "details": [err["msg"] for err in e.errors()],
                "success": False,
            },
            status_code=400,
        )
    except ValueError:
        # body was not JSON at all
        return JSONResponse(
            {"error": "Invalid input", "details": ["Request body must be JSON"], "success": False},
            status_code=400,
        )

    # 2) Authenticate and open a session
    try:
        auth_result = await sessionService.authenticate_user(
            credentials.username, credentials.password
        )
    except Exception as e:
        logger.warning(f"Login failed for {credentials.username!r} from {ip_address}: {e}")
        return JSONResponse({"error": str(e) or "Authentication failed", "success": False}, status_code=401)

    user = auth_result["user"]
    await sessionService.log_user_action(
        user["id"], "LOGIN", "auth", {"source": auth_result["source"]}, ip_address, user_agent
    )
    logger.info(f"User {user['username']} logged in ({auth_result['source']})")

    # 3) Return response with cookie
    res = JSONResponse({
        "success": True,
        "user": user,
        "token": auth_result["token"],
        "source": auth_result["source"],
    })
    res.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=auth_result["token"],
        httponly=True,
        secure=os.getenv("ENVIRONMENT") == "production",
        samesite="strict",
        max_age=SESSION_MAX_AGE,
        path="/",
    )
    return res


async def demo_credentials_api():
    return JSONResponse({"demo_credentials": sessionService.get_demo_credentials()})


async def current_user_api(request: Request):
    try:
        session_token = request.cookies.get(SESSION_COOKIE_NAME)
        if not session_token:
            return JSONResponse({"error": "Not authenticated", "authenticated": False}, status_code=401)

        session = await sessionService.validate_session(session_token)
        if not session["valid"]:
            res = JSONResponse(
                {"error": session.get("error") or "Invalid session", "authenticated": False},
                status_code=401,
            )
            res.delete_cookie(SESSION_COOKIE_NAME, path="/")
            return res

        return JSONResponse({
            "user": session["user"],
            "authenticated": True,
            "source": session["source"],
        })
    except Exception:
        logger.exception("Authentication check failed")
        return JSONResponse({"error": "Authentication check failed", "authenticated": False}, status_code=500)


async def logout_user_api(request: Request):
    try:
        # 1) Invalidate the server-side session, if there is one
        session_token = request.cookies.get(SESSION_COOKIE_NAME)
        if session_token:
            await sessionService.invalidate_session(session_token)

        # 2) Clear the cookie whether or not a session existed
        res = JSONResponse({"success": True, "message": "Logged out successfully"})
        res.delete_cookie(SESSION_COOKIE_NAME, path="/")
        logger.info("Session closed" if session_token else "Logout without session cookie")
        return res
    except Exception:
        logger.exception("Logout error")
        res = JSONResponse({"error": "Logout failed"}, status_code=500)
        res.delete_cookie(SESSION_COOKIE_NAME, path="/")
        return res
