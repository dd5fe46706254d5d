"""
API endpoints for clients.

Clients are the companies projects are delivered for. A client cannot be
deleted while projects still reference it.
"""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Query, status

from vira.core.models.io.clients import ClientCreate, ClientDetailRead, ClientRead, ClientUpdate
from vira.server.services import catalog
from vira.server.services.auth import AdminDep, StaffDep
from vira.server.services.deps import ReposDep

router = APIRouter(tags=["clients"])


@router.get(
    "",
    response_model=List[ClientRead],
    summary="List Clients",
    description="List clients ordered by name, optionally filtered by a case-insensitive name search.",
    response_description="A page of client records.",
    responses={200: {"description": "Clients retrieved successfully"}},
)
async def list_clients(
    repos: ReposDep,
    _user: StaffDep,
    search: Optional[str] = None,
    limit: int = Query(default=100, ge=1, le=1000),
    offset: int = Query(default=0, ge=0),
) -> List[ClientRead]:
    clients = await repos.clients.list(limit=limit, offset=offset, filters={"search": search})
    return [ClientRead.model_validate(c) for c in clients]


@router.get(
    "/{client_id}",
    response_model=ClientDetailRead,
    summary="Get Client",
    description="Retrieve a client with the number of projects delivered for it.",
    response_description="The client record and its project count.",
    responses={
        200: {"description": "Client found"},
        404: {"description": "Client not found"},
    },
)
async def get_client(client_id: int, repos: ReposDep, _user: StaffDep) -> ClientDetailRead:
    client = await catalog.get_client(repos, client_id)
    detail = ClientDetailRead.model_validate(client)
    detail.total_projects = await repos.clients.count_projects(client_id)
    return detail


@router.post(
    "",
    response_model=ClientRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Client",
    description="Create a client. Names are unique ignoring case.",
    response_description="The created client.",
    responses={
        201: {"description": "Client created"},
        409: {"description": "A client with this name already exists"},
    },
)
async def create_client(payload: ClientCreate, repos: ReposDep, _user: StaffDep) -> ClientRead:
    """
    Create a client.

    - **client_name**: Required and unique.
    - **industry**, **time_zone**, **preferred_contact**, **client_notes**: Optional details.
    """
    return ClientRead.model_validate(await catalog.create_client(repos, payload))


@router.patch(
    "/{client_id}",
    response_model=ClientRead,
    summary="Update Client",
    description="Partially update a client.",
    response_description="The updated client.",
    responses={
        200: {"description": "Client updated"},
        404: {"description": "Client not found"},
        409: {"description": "Another client already has this name"},
    },
)
async def update_client(client_id: int, payload: ClientUpdate, repos: ReposDep, _user: StaffDep) -> ClientRead:
    return ClientRead.model_validate(await catalog.update_client(repos, client_id, payload))


@router.delete(
    "/{client_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Client",
    description="Delete a client that no project references. Admin only.",
    responses={
        204: {"description": "Client deleted"},
        404: {"description": "Client not found"},
        409: {"description": "Projects still reference the client"},
    },
)
async def delete_client(client_id: int, repos: ReposDep, _user: AdminDep) -> None:
    await catalog.delete_client(repos, client_id)
