"""
V1 API router aggregator — wires all endpoint modules together.
"""

from fastapi import APIRouter

from worktrack.api.v1.endpoints import admin, attendance, health, leaves, settings

api_router = APIRouter()

# Liveness / DB ping
api_router.include_router(health.router)

# Per-user leave quota and WFH pattern
api_router.include_router(settings.router)

# Marking, stats, monthly report, sync
api_router.include_router(attendance.router)

# Leave requests, edits and leave reports
api_router.include_router(leaves.router)

# Admin views and multi-user sync
api_router.include_router(admin.router)
