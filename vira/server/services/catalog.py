"""
Vendors, clients and projects.

CRUD rules that go beyond a plain insert: vendor codes and unique names,
clients that cannot be deleted while projects reference them, project
references that must exist and the one-way project status flow.
"""

from __future__ import annotations

from vira.core.database import utc_now
from vira.core.database.entities.clients import Client
from vira.core.database.entities.projects import PROJECT_STATUS_TRANSITIONS, Project, ProjectStatus
from vira.core.database.entities.vendors import Vendor
from vira.core.database.repositories import RepositoryBundle
from vira.core.errors import ConflictError, NotFoundError, ValidationFailedError
from vira.core.logging_config import get_logger
from vira.core.models.io.clients import ClientCreate, ClientUpdate
from vira.core.models.io.projects import ProjectCreate, ProjectUpdate
from vira.core.models.io.vendors import VendorCreate, VendorProfileUpdate, VendorUpdate

logger = get_logger(__name__)


# ---------------------------------------------------------------------
# Vendors
# ---------------------------------------------------------------------


async def get_vendor(repos: RepositoryBundle, vendor_id: int) -> Vendor:
    vendor = await repos.vendors.get_by_id(vendor_id)
    if vendor is None:
        raise NotFoundError("Vendor not found")
    return vendor


async def _ensure_vendor_name_free(repos: RepositoryBundle, name: str, vendor_id: int | None = None) -> None:
    existing = await repos.vendors.get_by_name_ci(name)
    if existing is not None and existing.vendor_id != vendor_id:
        raise ConflictError(f'A vendor named "{existing.vendor_name}" already exists')


async def create_vendor(repos: RepositoryBundle, request: VendorCreate) -> Vendor:
    name = request.vendor_name.strip()
    if not name:
        raise ValidationFailedError("Vendor name is required")
    await _ensure_vendor_name_free(repos, name)

    values = request.model_dump()
    values["vendor_name"] = name
    if not values.get("vendor_code"):
        values["vendor_code"] = await repos.vendors.next_vendor_code()
    vendor = await repos.vendors.create(Vendor(**values))
    logger.info(f"Created vendor {vendor.vendor_code} ({vendor.vendor_name})")
    return vendor


async def update_vendor(
    repos: RepositoryBundle, vendor_id: int, request: VendorUpdate | VendorProfileUpdate
) -> Vendor:
    vendor = await get_vendor(repos, vendor_id)
    changes = request.model_dump(exclude_unset=True)
    if changes.get("vendor_name"):
        changes["vendor_name"] = changes["vendor_name"].strip()
        await _ensure_vendor_name_free(repos, changes["vendor_name"], vendor_id)
    for key, value in changes.items():
        setattr(vendor, key, value)
    vendor.updated_at = utc_now()
    return await repos.vendors.update(vendor)


# ---------------------------------------------------------------------
# Clients
# ---------------------------------------------------------------------


async def get_client(repos: RepositoryBundle, client_id: int) -> Client:
    client = await repos.clients.get_by_id(client_id)
    if client is None:
        raise NotFoundError("Client not found")
    return client


async def create_client(repos: RepositoryBundle, request: ClientCreate) -> Client:
    name = request.client_name.strip()
    if await repos.clients.get_by_name_ci(name):
        raise ConflictError(f'A client named "{name}" already exists')
    values = request.model_dump()
    values["client_name"] = name
    return await repos.clients.create(Client(**values))


async def update_client(repos: RepositoryBundle, client_id: int, request: ClientUpdate) -> Client:
    client = await get_client(repos, client_id)
    changes = request.model_dump(exclude_unset=True)
    if changes.get("client_name"):
        changes["client_name"] = changes["client_name"].strip()
        existing = await repos.clients.get_by_name_ci(changes["client_name"])
        if existing is not None and existing.client_id != client_id:
            raise ConflictError(f'A client named "{existing.client_name}" already exists')
    for key, value in changes.items():
        setattr(client, key, value)
    client.updated_at = utc_now()
    return await repos.clients.update(client)


async def delete_client(repos: RepositoryBundle, client_id: int) -> None:
    await get_client(repos, client_id)
    referenced = await repos.clients.count_projects(client_id)
    if referenced:
        raise ConflictError(
            "Client has projects and cannot be deleted", details={"project_count": referenced}
        )
    await repos.clients.delete(client_id)


# ---------------------------------------------------------------------
# Projects
# ---------------------------------------------------------------------


async def get_project(repos: RepositoryBundle, project_id: int) -> Project:
    project = await repos.projects.get_by_id(project_id)
    if project is None:
        raise NotFoundError("Project not found")
    return project


async def _check_references(repos: RepositoryBundle, vendor_id: int | None, client_id: int | None) -> None:
    if vendor_id is not None and await repos.vendors.get_by_id(vendor_id) is None:
        raise ValidationFailedError(f"Vendor {vendor_id} does not exist")
    if client_id is not None and await repos.clients.get_by_id(client_id) is None:
        raise ValidationFailedError(f"Client {client_id} does not exist")


async def create_project(repos: RepositoryBundle, request: ProjectCreate) -> Project:
    await _check_references(repos, request.vendor_id, request.client_id)
    values = request.model_dump()
    values["status"] = request.status.value
    return await repos.projects.create(Project(**values))


async def update_project(repos: RepositoryBundle, project_id: int, request: ProjectUpdate) -> Project:
    project = await get_project(repos, project_id)
    changes = request.model_dump(exclude_unset=True)
    await _check_references(repos, changes.get("vendor_id"), changes.get("client_id"))
    for key, value in changes.items():
        setattr(project, key, value)
    project.updated_at = utc_now()
    return await repos.projects.update(project)


def check_status_transition(current: str, target: ProjectStatus) -> None:
    try:
        allowed = PROJECT_STATUS_TRANSITIONS[ProjectStatus(current)]
    except ValueError:
        allowed = set()
    if target not in allowed:
        raise ValidationFailedError(f"Invalid status transition from {current} to {target.value}")


async def change_project_status(repos: RepositoryBundle, project_id: int, target: ProjectStatus) -> Project:
    project = await get_project(repos, project_id)
    check_status_transition(project.status, target)
    project.status = target.value
    project.updated_at = utc_now()
    project = await repos.projects.update(project)
    logger.info(f"Project {project_id} moved to {target.value}")
    return project
