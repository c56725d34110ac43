"""
JSON responses for the sign-in views.
"""
from django.http import JsonResponse
from typing import Optional


def error_response(message: str, status: int = 400, error: Optional[str] = None) -> JsonResponse:
    """
    Create a standardized error response.

    Args:
        message: Human readable description, never a token or secret
        status: HTTP status code (default: 400)
        error: Optional OAuth error code reported by MSAL (e.g. 'invalid_grant')

    Returns:
        JsonResponse with error status and message
    """
    body = {'status': 'error', 'error': message}
    if error:
        body['code'] = error
    return JsonResponse(body, status=status)


def success_response(message: str, **fields) -> JsonResponse:
    """Create a standardized success response with any extra fields."""
    return JsonResponse({'status': 'success', 'message': message, **fields})
