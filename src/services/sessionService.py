# services/sessionService.py

import logging
import os
import secrets
from datetime import datetime, timedelta, timezone

import bcrypt
from pymongo.errors import PyMongoError
from starlette.concurrency import run_in_threadpool

from constants import SESSION_MAX_AGE, demo_users, role_descriptions
from db.mongo import (
    get_audit_logs_collection,
    get_sessions_collection,
    get_users_collection,
    should_use_real_data,
)

logger = logging.getLogger("session_service")
logger.setLevel(logging.INFO)

# token -> {"user", "expiresAt"}, only used when real data is disabled
_demo_sessions = {}


class InvalidCredentialsError(Exception):
    pass


def generate_session_token() -> str:
    return secrets.token_hex(64)


def hash_password(password: str) -> str:
    rounds = int(os.getenv("BCRYPT_ROUNDS", "12"))
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds)).decode("utf-8")


def verify_password(password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(password.encode("utf-8"), hashed_password.encode("utf-8"))


def _public_user(user: dict) -> dict:
    return {
        "id": str(user.get("id") or user.get("_id")),
        "username": user["username"],
        "email": user.get("email"),
        "role": user.get("role"),
        "permissions": user.get("permissions", []),
    }


def _drop_expired_demo_sessions(now):
    for token in [t for t, entry in _demo_sessions.items() if entry["expiresAt"] <= now]:
        del _demo_sessions[token]


def _demo_login(username: str, password: str, source: str) -> dict:
    user = next(
        (u for u in demo_users if u["username"] == username and u["password"] == password),
        None,
    )
    if not user:
        raise InvalidCredentialsError("Invalid credentials")

    now = datetime.now(timezone.utc)
    _drop_expired_demo_sessions(now)

    token = generate_session_token()
    public_user = _public_user(user)
    _demo_sessions[token] = {
        "user": public_user,
        "expiresAt": now + timedelta(seconds=SESSION_MAX_AGE),
    }
    return {"user": public_user, "token": token, "source": source}


async def authenticate_user(username: str, password: str) -> dict:
    """
    Check the credentials and open a new session.

    Returns {"user", "token", "source"}. Raises InvalidCredentialsError when the
    username/password pair is rejected. If the database is unreachable the demo
    accounts are used instead.
    """
    if not should_use_real_data():
        return _demo_login(username, password, "mock_auth")

    try:
        users_collection = get_users_collection()
        user = await run_in_threadpool(users_collection.find_one, {"username": username})
        if not user or not user.get("isActive", True):
            raise InvalidCredentialsError("Invalid credentials")

        # bcrypt is slow on purpose, keep it off the event loop
        password_ok = await run_in_threadpool(verify_password, password, user["password"])
        if not password_ok:
            raise InvalidCredentialsError("Invalid credentials")

        now = datetime.now(timezone.utc)
        await run_in_threadpool(
            users_collection.update_one,
            {"_id": user["_id"]},
            {"$set": {"lastLogin": now}},
        )

        token = generate_session_token()
        await run_in_threadpool(
            get_sessions_collection().insert_one,
            {
                "userId": user["_id"],
                "token": token,
                "createdAt": now,
                "expiresAt": now + timedelta(seconds=SESSION_MAX_AGE),
            },
        )
        return {"user": _public_user(user), "token": token, "source": "database_auth"}
    except PyMongoError:
        logger.exception("Database authentication failed, falling back to demo users")
        return _demo_login(username, password, "mock_fallback")


async def validate_session(token: str) -> dict:
    if not should_use_real_data():
        entry = _demo_sessions.get(token)
        if entry and entry["expiresAt"] <= datetime.now(timezone.utc):
            del _demo_sessions[token]
            entry = None
        if not entry:
            return {"user": None, "valid": False, "error": "Invalid or expired token"}
        return {"user": entry["user"], "valid": True, "source": "mock_validation"}

    try:
        session = await run_in_threadpool(get_sessions_collection().find_one, {"token": token})
        if not session:
            return {"user": None, "valid": False, "error": "Session expired"}

        expires_at = session["expiresAt"]
        # pymongo hands back naive UTC datetimes unless the client is tz_aware
        if expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=timezone.utc)
        if expires_at < datetime.now(timezone.utc):
            return {"user": None, "valid": False, "error": "Session expired"}

        user = await run_in_threadpool(
            get_users_collection().find_one, {"_id": session["userId"]}
        )
        if not user:
            return {"user": None, "valid": False, "error": "Session expired"}

        return {"user": _public_user(user), "valid": True, "source": "database_validation"}
    except PyMongoError as e:
        logger.error(f"Session validation failed: {e}")
        return {"user": None, "valid": False, "error": str(e)}


async def invalidate_session(token: str) -> dict:
    if not should_use_real_data():
        _demo_sessions.pop(token, None)
        return {"success": True, "source": "mock_logout"}

    try:
        await run_in_threadpool(get_sessions_collection().delete_one, {"token": token})
        return {"success": True, "source": "database_logout"}
    except PyMongoError:
        # The cookie is going away regardless, so a stale row is not fatal
        logger.exception("Database logout failed")
        return {"success": True, "source": "mock_fallback"}


async def log_user_action(
    user_id: str,
    action: str,
    resource: str,
    details: dict = None,
    ip_address: str = None,
    user_agent: str = None,
):
    if not should_use_real_data():
        return

    try:
        await run_in_threadpool(
            get_audit_logs_collection().insert_one,
            {
                "userId": user_id,
                "action": action,
                "resource": resource,
                "details": details or {},
                "ipAddress": ip_address,
                "userAgent": user_agent,
                "createdAt": datetime.now(timezone.utc),
            },
        )
    except PyMongoError as e:
        logger.error(f"Failed to log user action: {e}")


def get_demo_credentials() -> list:
    credentials = []
    for user in demo_users:
        role, description = role_descriptions[user["role"]]
        credentials.append({
            "username": user["username"],
            "password": user["password"],
            "role": role,
            "description": description,
        })
    return credentials
