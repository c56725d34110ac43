"""
Centralized configuration for the MSAL token cache adapters.
All Azure AD and token cache settings should be imported from this module.
Configuration values are read from environment variables for security.
"""
import os
import logging
from pathlib import Path
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent.parent

# Load .env file if it exists
env_path = BASE_DIR / '.env'
if env_path.exists():
    load_dotenv(env_path)

def get_required_env_var(var_name):
    """
    Get a required environment variable or raise an error.

    Args:
        var_name: Name of the environment variable

    Returns:
        The value of the environment variable

    Raises:
        ValueError: If the environment variable is not set
    """
    value = os.environ.get(var_name)
    if not value:
        error_msg = f"Required environment variable '{var_name}' is not set"
        logger.error(error_msg)
        raise ValueError(error_msg)
    return value

try:
    # Azure AD Configuration
    AZURE_CLIENT_ID = get_required_env_var("AZURE_CLIENT_ID")
    AZURE_TENANT_ID = get_required_env_var("AZURE_TENANT_ID")
    AZURE_AUTHORITY = f"https://login.microsoftonline.com/{AZURE_TENANT_ID}"
    AZURE_CLIENT_SECRET = get_required_env_var("AZURE_CLIENT_SECRET")

except ValueError as e:
    logger.critical(f"Configuration error: {e}")
    # Set variables to None to allow module import but fail on usage
    AZURE_CLIENT_ID = None
    AZURE_TENANT_ID = None
    AZURE_AUTHORITY = None
    AZURE_CLIENT_SECRET = None

# Token cache settings. App tokens are kept for 48 hours by default;
# production setups may raise this up to 90 days.
TOKEN_CACHE_TTL_HOURS = float(os.getenv('TOKEN_CACHE_TTL_HOURS', '48'))
TOKEN_CACHE_ALIAS = os.getenv('TOKEN_CACHE_ALIAS', 'token_cache')
TOKEN_CACHE_DIR = Path(os.getenv('TOKEN_CACHE_DIR', str(BASE_DIR / 'token_cache')))

# Session key holding the signed-in user's id token claims
SESSION_CLAIMS_KEY = 'id_token_claims'

# Graph scopes requested at sign-in (constants, not secrets)
USER_SCOPES = ["User.ReadBasic.All"]
APP_SCOPES = ["https://graph.microsoft.com/.default"]

def get_authority_url():
    """Get the Azure AD authority URL."""
    if not AZURE_AUTHORITY:
        raise ValueError("Azure Authority URL is not configured. Check AZURE_TENANT_ID environment variable.")
    return AZURE_AUTHORITY

def is_configured():
    """Check if all required configuration is present."""
    required_vars = [
        AZURE_CLIENT_ID,
        AZURE_TENANT_ID,
        AZURE_CLIENT_SECRET,
    ]
    return all(var is not None for var in required_vars)
