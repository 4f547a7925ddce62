"""Root API router for v1 endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from survey_tracker.api.v1 import audit, auth, clients, cve, findings, health, notes, settings, statistics, surveys, users

api_router = APIRouter()
api_router.include_router(health.router)
api_router.include_router(auth.router)
api_router.include_router(clients.router)
api_router.include_router(surveys.router)
api_router.include_router(statistics.router)
api_router.include_router(settings.router)
api_router.include_router(audit.router)
api_router.include_router(users.router)
api_router.include_router(findings.router)
api_router.include_router(cve.router)
api_router.include_router(notes.router)


def get_api_router() -> APIRouter:
    return api_router
