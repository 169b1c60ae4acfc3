"""Main API router that includes versioned routers."""

from fastapi import APIRouter

from api.v1 import (
    auth,
    expenses,
    files,
    health,
    invoices,
    onedrive,
    organizations,
    projects,
    proposals,
    services,
    tasks,
)

# Main API router
api_router = APIRouter()

# Include v1 routers
v1_router = APIRouter(prefix="/v1")
v1_router.include_router(health.router, tags=["health"])
v1_router.include_router(auth.router, tags=["auth"])
v1_router.include_router(organizations.router, tags=["organizations"])
v1_router.include_router(projects.router, tags=["projects"])
v1_router.include_router(tasks.router, tags=["tasks"])
v1_router.include_router(services.router, tags=["services"])
v1_router.include_router(invoices.router, tags=["invoices"])
v1_router.include_router(expenses.router, tags=["expenses"])
v1_router.include_router(files.router, tags=["files"])
v1_router.include_router(proposals.router, tags=["proposals"])
v1_router.include_router(onedrive.router, tags=["onedrive"])

api_router.include_router(v1_router)
