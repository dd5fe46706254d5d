"""
Merge a duplicate vendor into another.

CSV imports sometimes create a second spelling of an existing vendor. A
merge keeps the "project vendor", renames it, moves the "csv vendor"'s
projects and ratings over and deletes the csv vendor. The steps are
separate writes; when one fails the completed steps are reverted with
compensating writes and ``TransactionRollbackError`` is raised.
"""

from __future__ import annotations

from typing import Awaitable, Callable, List, Tuple

from sqlalchemy.exc import SQLAlchemyError

from vira.core.database.entities.vendors import Vendor
from vira.core.database.repositories import RepositoryBundle
from vira.core.errors import TransactionRollbackError, ValidationFailedError
from vira.core.logging_config import get_logger
from vira.core.models.io.merge import MergePreview, MergeRequest, MergeResult
from vira.core.models.io.projects import ProjectRead
from vira.core.models.io.ratings import RatingRead
from vira.core.models.io.vendors import VendorRead

logger = get_logger(__name__)

ROLLBACK_MESSAGE = "Transaction failed with rollback attempted"


class VendorMerger:
    def __init__(self, repos: RepositoryBundle) -> None:
        self._repos = repos

    async def validate(self, request: MergeRequest) -> Tuple[Vendor, Vendor, str]:
        """Return ``(csv_vendor, project_vendor, keep_name)`` or raise ValidationFailedError."""
        keep_name = (request.keep_name or "").strip()
        if not request.csv_vendor_id or not request.project_vendor_id or not keep_name:
            raise ValidationFailedError("csv_vendor_id, project_vendor_id and keep_name are required")
        if request.csv_vendor_id == request.project_vendor_id:
            raise ValidationFailedError("Cannot merge a vendor with itself")

        csv_vendor = await self._repos.vendors.get_by_id(request.csv_vendor_id)
        project_vendor = await self._repos.vendors.get_by_id(request.project_vendor_id)
        if csv_vendor is None or project_vendor is None:
            raise ValidationFailedError("One or both vendors not found")

        clash = await self._repos.vendors.get_by_name_ci(keep_name)
        if clash is not None and clash.vendor_id not in (csv_vendor.vendor_id, project_vendor.vendor_id):
            raise ValidationFailedError(
                f'Another vendor is already named "{clash.vendor_name}"',
                details={"vendor_id": clash.vendor_id},
            )
        return csv_vendor, project_vendor, keep_name

    async def preview(self, request: MergeRequest) -> MergePreview:
        csv_vendor, project_vendor, keep_name = await self.validate(request)
        projects = await self._repos.projects.list_by_vendor(csv_vendor.vendor_id)
        ratings = await self._repos.ratings.list_by_vendor(csv_vendor.vendor_id)
        return MergePreview(
            csv_vendor=VendorRead.model_validate(csv_vendor),
            project_vendor=VendorRead.model_validate(project_vendor),
            keep_name=keep_name,
            affected_projects=[ProjectRead.model_validate(p) for p in projects],
            affected_ratings=[RatingRead.model_validate(r) for r in ratings],
        )

    async def merge(self, request: MergeRequest) -> MergeResult:
        csv_vendor, project_vendor, keep_name = await self.validate(request)
        csv_id = csv_vendor.vendor_id
        target_id = project_vendor.vendor_id
        original_name = project_vendor.vendor_name
        project_ids: List[int] = [p.project_id for p in await self._repos.projects.list_by_vendor(csv_id)]
        rating_ids: List[int] = [r.rating_id for r in await self._repos.ratings.list_by_vendor(csv_id)]
        done: List[str] = []

        try:
            project_vendor.vendor_name = keep_name
            await self._repos.vendors.update(project_vendor)
            done.append("rename")

            moved_projects = await self._repos.projects.reassign_vendor(project_ids, target_id)
            moved_ratings = await self._repos.ratings.reassign_vendor(rating_ids, target_id)
            done.append("reassign")

            await self._repos.vendors.delete(csv_id)
            done.append("delete")
        except SQLAlchemyError as e:
            await self._repos.session.rollback()
            logger.error(f"Merging vendor {csv_id} into {target_id} failed after {done}: {e}", exc_info=True)
            reverted = await self._revert(done, csv_id, target_id, original_name, project_ids, rating_ids)
            raise TransactionRollbackError(
                ROLLBACK_MESSAGE,
                details={"completed_steps": done, "reverted_steps": reverted, "error": str(e)},
            ) from e

        logger.info(
            f"Merged vendor {csv_id} into {target_id} as '{keep_name}' "
            f"({moved_projects} projects, {moved_ratings} ratings)"
        )
        return MergeResult(
            success=True,
            vendor_id=target_id,
            vendor_name=keep_name,
            projects_moved=moved_projects,
            ratings_moved=moved_ratings,
            deleted_vendor_id=csv_id,
        )

    async def _revert(
        self,
        done: List[str],
        csv_id: int,
        target_id: int,
        original_name: str,
        project_ids: List[int],
        rating_ids: List[int],
    ) -> List[str]:
        """Undo completed steps in reverse order; returns the steps that were undone."""
        reverted: List[str] = []
        if "rename" not in done:
            return reverted
        # Repointing is idempotent, so a half-finished reassign is undone too
        if project_ids or rating_ids:
            if await self._attempt("reassign", lambda: self._move(project_ids, rating_ids, csv_id)):
                reverted.append("reassign")
        if await self._attempt("rename", lambda: self._rename(target_id, original_name)):
            reverted.append("rename")
        return reverted

    async def _move(self, project_ids: List[int], rating_ids: List[int], vendor_id: int) -> None:
        await self._repos.projects.reassign_vendor(project_ids, vendor_id)
        await self._repos.ratings.reassign_vendor(rating_ids, vendor_id)

    async def _rename(self, vendor_id: int, name: str) -> None:
        vendor = await self._repos.vendors.get_by_id(vendor_id)
        if vendor is None:
            raise ValidationFailedError(f"Vendor {vendor_id} disappeared during merge")
        vendor.vendor_name = name
        await self._repos.vendors.update(vendor)

    async def _attempt(self, step: str, action: Callable[[], Awaitable[None]]) -> bool:
        try:
            await action()
        except (SQLAlchemyError, ValidationFailedError) as e:
            await self._repos.session.rollback()
            logger.error(f"Reverting merge step '{step}' failed: {e}", exc_info=True)
            return False
        return True
