"""Staff dashboard endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from vira.core.models.io.dashboard import DashboardRead
from vira.server.services.auth import StaffDep
from vira.server.services.dashboard import build_dashboard
from vira.server.services.deps import ReposDep

router = APIRouter(tags=["dashboard"])


@router.get(
    "",
    response_model=DashboardRead,
    summary="Dashboard",
    description="Record counts, top vendors, review completion and recently rated projects.",
    response_description="Dashboard figures.",
    responses={200: {"description": "Dashboard computed"}},
)
async def get_dashboard(repos: ReposDep, _user: StaffDep) -> DashboardRead:
    return await build_dashboard(repos)
