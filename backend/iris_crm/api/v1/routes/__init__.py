"""
Aggregate v1 API routes.

Convention: Use "" (not "/") for the root path of a segment (e.g. @router.get(""), @router.post(""))
so the route is /api/v1/accounts not /api/v1/accounts/. This avoids 307 redirects when the
request arrives without a trailing slash.
"""

from fastapi import APIRouter

from iris_crm.api.v1.endpoints import accounts, dashboard, llm, profiles, projects, updates

api_router = APIRouter()

api_router.include_router(profiles.router, prefix="")
api_router.include_router(accounts.router, prefix="")
api_router.include_router(projects.router, prefix="")
api_router.include_router(updates.router, prefix="")
api_router.include_router(dashboard.router, prefix="")
api_router.include_router(llm.router, prefix="")
