"""
Centralized Microsoft authentication service.
Wires MSAL confidential clients to the session and memory backed token caches.
"""
import logging
from typing import List, Optional

import msal

from msal_token_cache import msal_config
from msal_token_cache.adapters import AppMemoryTokenCache, PerUserSessionTokenCache
from msal_token_cache.exceptions import AuthenticationError, ConfigurationError
from msal_token_cache.identity import ClaimsPrincipal, get_msal_account_id, principal_from_session
from msal_token_cache.notifications import NotifyingTokenCache

logger = logging.getLogger(__name__)

AUTH_FLOW_SESSION_KEY = 'auth_flow'


class MicrosoftAuthService:
    """
    Centralized service for Microsoft authentication using MSAL.

    The application's own tokens live in one process-wide client backed by
    AppMemoryTokenCache. User tokens get a fresh client per request, backed
    by PerUserSessionTokenCache on that request's session.
    """

    _instance = None
    _app = None
    _app_cache = None

    def __new__(cls):
        """Singleton pattern to reuse the same app-level MSAL client."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self):
        """Initialize the app-level MSAL client if not already initialized."""
        if MicrosoftAuthService._app is None:
            self._initialize_app()

    @classmethod
    def reset(cls):
        """Drop the singleton so the next instance re-reads configuration."""
        cls._instance = None
        cls._app = None
        cls._app_cache = None

    def _build_client(self, token_cache):
        try:
            return msal.ConfidentialClientApplication(
                msal_config.AZURE_CLIENT_ID,
                client_credential=msal_config.AZURE_CLIENT_SECRET,
                authority=msal_config.get_authority_url(),
                token_cache=token_cache,
            )
        except Exception as e:
            logger.error(f"Failed to initialize MSAL application: {str(e)}")
            raise ConfigurationError(f"Failed to initialize authentication: {str(e)}") from e

    def _initialize_app(self):
        """Initialize the process-wide ConfidentialClientApplication."""
        if not msal_config.is_configured():
            raise ConfigurationError("Required Azure AD configuration is missing")

        cache = NotifyingTokenCache()
        app_cache = AppMemoryTokenCache(cache, msal_config.AZURE_CLIENT_ID)
        MicrosoftAuthService._app = self._build_client(cache)
        MicrosoftAuthService._app_cache = app_cache
        logger.info("MSAL application initialized successfully")

    def build_user_client(self, request, principal=None):
        """
        Build an MSAL client whose token cache is the user's session entry.

        Args:
            request: The current Django request
            principal: The signed-in user, if the caller already has it. Defaults
                to the claims stored in the session at sign-in.

        Returns:
            (client, adapter) tuple
        """
        if principal is None:
            principal = principal_from_session(request.session)
        cache = NotifyingTokenCache(principal=principal)
        adapter = PerUserSessionTokenCache(cache, request.session, principal=principal)
        return self._build_client(cache), adapter

    def initiate_sign_in(self, request, redirect_uri: str, scopes: Optional[List[str]] = None) -> str:
        """Start the authorization code flow and return the URL to redirect the user to."""
        client, _ = self.build_user_client(request)
        flow = client.initiate_auth_code_flow(scopes or msal_config.USER_SCOPES, redirect_uri=redirect_uri)
        request.session[AUTH_FLOW_SESSION_KEY] = flow
        return flow["auth_uri"]

    def complete_sign_in(self, request, auth_response: dict) -> dict:
        """
        Redeem the authorization code and cache the tokens under the new user's key.

        The user's claims are only known once the code is redeemed, so the tokens
        are acquired into memory first and persisted when the principal is bound.

        Returns:
            The id token claims of the signed-in user

        Raises:
            AuthenticationError: If the flow is missing or MSAL reports an error
        """
        flow = request.session.pop(AUTH_FLOW_SESSION_KEY, None)
        if not flow:
            raise AuthenticationError("No authorization code flow in progress for this session")

        # Claims of a previous user must not key the new user's tokens
        request.session.pop(msal_config.SESSION_CLAIMS_KEY, None)
        client, adapter = self.build_user_client(request, principal=None)
        result = client.acquire_token_by_auth_code_flow(flow, auth_response)
        if "error" in result:
            logger.error(f"Authorization code redemption failed: {result.get('error_description', result['error'])}")
            raise AuthenticationError(
                "Sign-in failed",
                error=result.get("error"),
                error_description=result.get("error_description"),
            )

        claims = result.get("id_token_claims") or {}
        request.session[msal_config.SESSION_CLAIMS_KEY] = claims
        key = adapter.bind_principal(ClaimsPrincipal(claims))
        if key:
            logger.info(f"User {key} signed in")
        else:
            logger.warning("Signed-in user has no object/tenant id claims; tokens were not cached")
        return claims

    def get_user_token(self, request, scopes: List[str]) -> str:
        """
        Acquire a token for the signed-in user from the session cache.

        Raises:
            AuthenticationError: If nobody is signed in or silent acquisition fails
        """
        principal = principal_from_session(request.session)
        key = get_msal_account_id(principal)
        if not key:
            raise AuthenticationError("No signed-in user")

        client, _ = self.build_user_client(request, principal=principal)
        accounts = client.get_accounts()
        matching = [account for account in accounts if account.get("home_account_id") == key]
        account = (matching or accounts or [None])[0]
        if account is None:
            raise AuthenticationError(f"No cached account for user {key}; sign in again")

        result = client.acquire_token_silent(scopes, account=account)
        if result and "access_token" in result:
            logger.debug(f"Token acquired silently for {key}, scopes: {scopes}")
            return result["access_token"]

        error_description = (result or {}).get("error_description", "no token in cache")
        raise AuthenticationError(f"Failed to acquire token for scopes: {scopes}", error_description=error_description)

    def get_app_token(self, scopes: Optional[List[str]] = None) -> str:
        """Acquire an app-only token with the client credentials grant."""
        scopes = scopes or msal_config.APP_SCOPES
        result = MicrosoftAuthService._app.acquire_token_for_client(scopes=scopes)
        if result and "access_token" in result:
            return result["access_token"]

        logger.error(f"App token acquisition failed: {(result or {}).get('error_description', 'Unknown error')}")
        raise AuthenticationError(
            f"Failed to acquire app token for scopes: {scopes}",
            error=(result or {}).get("error"),
            error_description=(result or {}).get("error_description"),
        )

    def sign_out(self, request):
        """Evict the user's token cache entry and end the session."""
        _, adapter = self.build_user_client(request)
        adapter.clear()
        request.session.flush()
        logger.info("User signed out")

    def clear_app_cache(self):
        """Evict the application's token cache entry."""
        MicrosoftAuthService._app_cache.clear()
        logger.info("App token cache cleared")


# Convenience functions
def get_app_token(scopes: Optional[List[str]] = None) -> str:
    auth_service = MicrosoftAuthService()
    return auth_service.get_app_token(scopes)


def get_user_token(request, scopes: List[str]) -> str:
    auth_service = MicrosoftAuthService()
    return auth_service.get_user_token(request, scopes)
