from fastapi import FastAPI

from . import admin, auth, health, onboarding, profiles, uploads


def register_routes(app: FastAPI) -> None:
    """Attach all API routers to the FastAPI application."""
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(onboarding.router)
    app.include_router(profiles.router)
    app.include_router(uploads.router)
    app.include_router(admin.router)
