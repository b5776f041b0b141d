from django.conf import settings

from core.utils import get_api_user


def api_user(request):
    """
    Add the logged-in API user to template context.
    Makes 'api_user' available in all templates.
    """
    return {'api_user': get_api_user(request)}


def dashboard_branding(request):
    """Dashboard name shown in the header and page titles."""
    return {'dashboard_name': getattr(settings, 'DASHBOARD_NAME', 'Classroom Admin')}
