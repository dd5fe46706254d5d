"""
Authentication and authorization dependencies.

Users sign in at the external identity provider; requests carry its bearer
JWT. ``get_current_user`` verifies the token, loads the matching
``user_profiles`` row and refuses inactive accounts. ``require_roles`` builds
role-gated dependencies on top of it. Scheduled jobs authenticate with the
shared ``CRON_SECRET`` instead.
"""

from __future__ import annotations

import secrets
from typing import Annotated, Any, Callable, Dict, Iterable, Optional

import jwt as pyjwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from vira.core.database.entities.users import STAFF_ROLES, UserProfile, UserRole
from vira.core.logging_config import get_logger
from vira.server.core.config import settings

from .deps import ReposDep

logger = get_logger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def verify_token(token: str) -> Dict[str, Any]:
    """Decode and validate a bearer JWT.

    Args:
        token: Raw JWT from the Authorization header

    Returns:
        The token claims; ``sub`` is the identity provider user id

    Raises:
        HTTPException: 401 when the token is expired, malformed or unsigned
    """
    identity = settings.identity
    if identity.jwt_secret is None:
        logger.error("AUTH_JWT_SECRET is not configured; rejecting bearer token")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")

    options: Dict[str, Any] = {"require": ["sub", "exp"]}
    kwargs: Dict[str, Any] = {}
    if identity.jwt_audience:
        kwargs["audience"] = identity.jwt_audience
    else:
        options["verify_aud"] = False

    try:
        return pyjwt.decode(
            token,
            identity.jwt_secret.get_secret_value(),
            algorithms=[identity.jwt_algorithm],
            options=options,
            **kwargs,
        )
    except pyjwt.ExpiredSignatureError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token expired")
    except pyjwt.InvalidTokenError as e:
        logger.debug(f"Rejected bearer token: {e}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")


async def get_current_user(
    repos: ReposDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> UserProfile:
    """Resolve the signed-in user's profile from the bearer token."""
    if credentials is None or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    claims = verify_token(credentials.credentials)
    profile = await repos.users.get_by_auth_user_id(str(claims["sub"]))
    if profile is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User profile not found")
    if not profile.is_active:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Account is inactive")

    return await repos.users.touch_last_login(profile)


CurrentUserDep = Annotated[UserProfile, Depends(get_current_user)]


def has_role(profile: Optional[UserProfile], roles: Iterable[str]) -> bool:
    """True when the profile is active and holds one of ``roles``."""
    if profile is None or not profile.is_active:
        return False
    return profile.role in set(roles)


def can_rate_projects(profile: Optional[UserProfile]) -> bool:
    return has_role(profile, STAFF_ROLES)


def can_view_all_ratings(profile: Optional[UserProfile]) -> bool:
    return has_role(profile, STAFF_ROLES)


def can_view_vendor_ratings(
    profile: Optional[UserProfile], vendor_id: int, linked_vendor_id: Optional[int] = None
) -> bool:
    """Staff see every vendor; a vendor user sees only the vendor it is linked to."""
    if can_view_all_ratings(profile):
        return True
    return (
        has_role(profile, [UserRole.vendor.value])
        and linked_vendor_id is not None
        and linked_vendor_id == vendor_id
    )


def require_roles(*roles: str) -> Callable:
    """Build a dependency that only lets users with one of ``roles`` through."""

    async def _dependency(current_user: CurrentUserDep) -> UserProfile:
        if not has_role(current_user, roles):
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient permissions")
        return current_user

    return _dependency


StaffDep = Annotated[UserProfile, Depends(require_roles(*STAFF_ROLES))]
AdminDep = Annotated[UserProfile, Depends(require_roles(UserRole.admin.value))]
VendorUserDep = Annotated[UserProfile, Depends(require_roles(UserRole.vendor.value))]


async def verify_cron_secret(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> None:
    """Accept only ``Authorization: Bearer <CRON_SECRET>``."""
    expected = settings.cron.secret
    if (
        expected is None
        or not expected.get_secret_value()
        or credentials is None
        or not secrets.compare_digest(credentials.credentials, expected.get_secret_value())
    ):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Unauthorized")
