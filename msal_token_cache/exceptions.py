"""
Custom exception classes for the MSAL token cache adapters.
"""

class TokenCacheError(Exception):
    """Base exception for token cache persistence errors."""
    pass

class BackingStoreUnavailable(TokenCacheError):
    """Raised when the session, memory or file store fails or is unreachable."""
    def __init__(self, message, key=None):
        super().__init__(message)
        self.key = key

class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""
    pass

class AuthenticationError(Exception):
    """Raised when MSAL fails to acquire a token."""
    def __init__(self, message, error=None, error_description=None):
        super().__init__(message)
        self.error = error
        self.error_description = error_description
