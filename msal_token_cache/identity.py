"""
Cache key derivation for user-bound and app-bound token caches.

A user's cache key is the MSAL account id ("<object id>.<tenant id>") built
from the signed-in principal's claims. An application's cache key is
"<client id>_AppTokenCache". A principal without the needed claims yields
no key, and callers skip cache interaction instead of failing.
"""
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from msal_token_cache.exceptions import ConfigurationError
from msal_token_cache.msal_config import SESSION_CLAIMS_KEY

OBJECT_ID_CLAIMS = ("oid", "http://schemas.microsoft.com/identity/claims/objectidentifier")
TENANT_ID_CLAIMS = ("tid", "http://schemas.microsoft.com/identity/claims/tenantid")

APP_CACHE_SUFFIX = "_AppTokenCache"


@dataclass(frozen=True)
class ClaimsPrincipal:
    """The authenticated identity in effect for a cache access."""

    claims: Mapping[str, Any] = field(default_factory=dict)

    def find_first(self, *claim_types: str) -> Optional[str]:
        for claim_type in claim_types:
            value = self.claims.get(claim_type)
            if value is not None and str(value).strip():
                return str(value).strip()
        return None


def _as_principal(principal) -> Optional[ClaimsPrincipal]:
    if principal is None or isinstance(principal, ClaimsPrincipal):
        return principal
    if isinstance(principal, Mapping):
        return ClaimsPrincipal(dict(principal))
    return None


def get_msal_account_id(principal) -> Optional[str]:
    """
    Build the MSAL account id of a principal.

    Args:
        principal: A ClaimsPrincipal, a plain mapping of claims, or None

    Returns:
        "<oid>.<tid>" if both claims are present, None otherwise
    """
    principal = _as_principal(principal)
    if principal is None:
        return None

    object_id = principal.find_first(*OBJECT_ID_CLAIMS)
    tenant_id = principal.find_first(*TENANT_ID_CLAIMS)
    if not object_id or not tenant_id:
        return None
    return f"{object_id}.{tenant_id}"


def app_cache_key(client_id: str) -> str:
    """Cache key of the application-bound token cache for a client id."""
    if not client_id or not str(client_id).strip():
        raise ConfigurationError("A client id is required to build the app token cache key")
    return f"{str(client_id).strip()}{APP_CACHE_SUFFIX}"


def principal_from_session(session) -> Optional[ClaimsPrincipal]:
    """Rebuild the signed-in principal from the id token claims kept in the session."""
    claims = session.get(SESSION_CLAIMS_KEY) if session is not None else None
    if not claims:
        return None
    return ClaimsPrincipal(dict(claims))
