import logging

from django.shortcuts import redirect
from django.urls import reverse
from django.views.decorators.http import require_GET, require_POST

from .exceptions import AuthenticationError, ConfigurationError
from .responses import error_response, success_response
from .services.auth_service import MicrosoftAuthService

logger = logging.getLogger(__name__)


@require_GET
def sign_in(request):
    """Redirect to the Microsoft sign-in page"""
    try:
        auth_service = MicrosoftAuthService()
        auth_uri = auth_service.initiate_sign_in(request, request.build_absolute_uri(reverse('auth_callback')))
    except ConfigurationError as e:
        logger.error(f"Sign-in unavailable: {e}")
        return error_response(str(e), status=503)
    return redirect(auth_uri)


@require_GET
def auth_callback(request):
    """Redeem the authorization code returned by Azure AD"""
    try:
        claims = MicrosoftAuthService().complete_sign_in(request, request.GET.dict())
    except ConfigurationError as e:
        return error_response(str(e), status=503)
    except AuthenticationError as e:
        return error_response(e.error_description or str(e), status=401, error=e.error)
    return success_response('Signed in', name=claims.get('name'))


@require_POST
def sign_out(request):
    """Clear the user's token cache and end the session"""
    try:
        MicrosoftAuthService().sign_out(request)
    except ConfigurationError as e:
        return error_response(str(e), status=503)
    return success_response('Signed out')
