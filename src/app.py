# app.py

import os
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from middleware.securityMiddleware import SecurityMiddleware
from routes import loginRoute, logoutRoute, meRoute  # Import your route modules

app = FastAPI()

# Rate limit + security headers on POST /api/auth/login; added first so CORS wraps it
app.add_middleware(SecurityMiddleware)

allowed_origins = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173")

# Middleware: cookies are sent cross-origin, so origins must be listed explicitly
app.add_middleware(
    CORSMiddleware,
    allow_origins=[origin.strip() for origin in allowed_origins.split(",") if origin.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Mount the routers with the corresponding path prefixes.
app.include_router(loginRoute.router, prefix="/api/auth")  # /api/auth/login
app.include_router(logoutRoute.router, prefix="/api/auth")  # /api/auth/logout
app.include_router(meRoute.router, prefix="/api/auth")  # /api/auth/me
