# This project was developed with assistance from AI tools.
"""
Keycloak bearer-token authentication for the onboarding API.

Employees, their managers and HR all sign in through the same realm. The
token's realm roles decide who the caller is, and its ``department`` claim
decides which checklists a manager can see.

Set AUTH_DISABLED=true to bypass validation (tests / local dev without Keycloak).
"""

import logging
import re
import time
from typing import Annotated

import httpx
import jwt
from db.enums import UserRole
from fastapi import Depends, HTTPException, Request, status

from ..core.auth import build_data_scope
from ..core.config import settings
from ..schemas.auth import DataScope, TokenPayload, UserContext

logger = logging.getLogger(__name__)


class _RealmKeys:
    """Signing keys published by the Keycloak realm, cached for JWKS_CACHE_TTL."""

    def __init__(self):
        self._key_set: jwt.PyJWKSet | None = None
        self._fetched_at = 0.0

    @staticmethod
    def _certs_url() -> str:
        return f"{settings.KEYCLOAK_URL}/realms/{settings.KEYCLOAK_REALM}/protocol/openid-connect/certs"

    def _load(self, force_refresh: bool) -> jwt.PyJWKSet:
        stale = time.time() - self._fetched_at > settings.JWKS_CACHE_TTL
        if self._key_set is None or stale or force_refresh:
            try:
                response = httpx.get(self._certs_url(), timeout=5)
                response.raise_for_status()
            except httpx.HTTPError as exc:
                logger.error("Failed to fetch JWKS from Keycloak: %s", exc)
                raise HTTPException(
                    status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                    detail="Authentication service unavailable",
                ) from exc
            self._key_set = jwt.PyJWKSet.from_dict(response.json())
            self._fetched_at = time.time()
        return self._key_set

    def signing_key(self, kid: str | None) -> jwt.PyJWK:
        # A miss refetches once in case the realm rotated its keys
        for force_refresh in (False, True):
            for key in self._load(force_refresh).keys:
                if key.key_id == kid:
                    return key
        raise jwt.InvalidTokenError(f"No matching key found for kid={kid}")


_realm_keys = _RealmKeys()


def _bearer_token(request: Request) -> str | None:
    scheme, _, token = request.headers.get("Authorization", "").partition(" ")
    if scheme != "Bearer" or not token:
        return None
    return token


def _decode_token(token: str) -> TokenPayload:
    """Validate the signature and issuer, then parse the claims we use."""
    key = _realm_keys.signing_key(jwt.get_unverified_header(token).get("kid"))
    claims = jwt.decode(
        token,
        key.key,
        algorithms=["RS256"],
        issuer=f"{settings.KEYCLOAK_URL}/realms/{settings.KEYCLOAK_REALM}",
        options={"verify_aud": False},
    )
    return TokenPayload(**claims)


def _resolve_role(token_payload: TokenPayload) -> UserRole:
    """Pick the most privileged known role from realm_access.roles."""
    granted = set(token_payload.realm_access.get("roles", []))

    # Keycloak built-ins are skipped; UserRole declaration order is privilege order
    user_roles = [role for role in UserRole if role.value in granted]
    if not user_roles:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="No recognized role assigned",
        )

    if len(user_roles) > 1:
        logger.info(
            "User %s has multiple roles %s, using %s",
            token_payload.sub,
            [r.value for r in user_roles],
            user_roles[0].value,
        )
    return user_roles[0]


def normalize_department(raw: str | None) -> str | None:
    """Map a directory department name onto a catalog key.

    "Information Technology" and "information-technology" both become
    ``information_technology``. Blank values mean no department.
    """
    if raw is None:
        return None
    key = re.sub(r"[\s\-]+", "_", raw.strip().lower())
    return key or None


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


# ---------------------------------------------------------------------------
# FastAPI dependencies
# ---------------------------------------------------------------------------

_DISABLED_USER = UserContext(
    user_id="dev-user",
    role=UserRole.ADMIN,
    email="dev@onboarding.local",
    name="Dev User",
    data_scope=DataScope(full_access=True),
)


async def get_current_user(request: Request) -> UserContext:
    """Resolve the caller's identity, role, department and data scope.

    When AUTH_DISABLED=true, returns a dev admin user without token validation.
    """
    if settings.AUTH_DISABLED:
        return _DISABLED_USER

    token = _bearer_token(request)
    if not token:
        raise _unauthorized("Missing authentication token")

    try:
        payload = _decode_token(token)
    except jwt.ExpiredSignatureError as exc:
        raise _unauthorized("Token has expired") from exc
    except jwt.InvalidTokenError as exc:
        raise _unauthorized("Invalid token") from exc

    role = _resolve_role(payload)
    department = normalize_department(payload.department)
    return UserContext(
        user_id=payload.sub,
        role=role,
        email=payload.email,
        name=payload.name or payload.preferred_username,
        department=department,
        data_scope=build_data_scope(role, payload.sub, department),
    )


CurrentUser = Annotated[UserContext, Depends(get_current_user)]


def require_roles(*allowed_roles: UserRole):
    """Dependency factory: restrict a route to specific roles.

    Usage:
        @router.post("/checklists", dependencies=[Depends(require_roles(*UserRole.hr_roles()))])
    """

    async def _check(user: CurrentUser) -> UserContext:
        if user.role not in allowed_roles:
            logger.warning(
                "RBAC denied: user=%s role=%s attempted route requiring %s",
                user.user_id,
                user.role.value,
                sorted(r.value for r in allowed_roles),
            )
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )
        return user

    return _check
