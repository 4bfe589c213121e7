from __future__ import annotations

from fastapi import APIRouter

from . import auth, health, likes, messages, profiles, projects, reactions

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(auth.router)
api_router.include_router(profiles.router)
api_router.include_router(projects.router)
api_router.include_router(reactions.router)
api_router.include_router(messages.router)
api_router.include_router(likes.router)

__all__ = ["api_router"]
