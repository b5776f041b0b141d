import logging

from core.api import TransportError, client_for_request, get_collection
from core.utils import admin_required, htmx_render

logger = logging.getLogger(__name__)

# (label, entity, icon) for the dashboard stat cards
DASHBOARD_STATS = [
    ('Users', 'user', 'fa-solid fa-users'),
    ('Students', 'student', 'fa-solid fa-user-graduate'),
    ('Teachers', 'teacher', 'fa-solid fa-chalkboard-user'),
    ('Attendance Lists', 'attendanceList', 'fa-solid fa-clipboard-user'),
    ('Vocab Lists', 'vocabList', 'fa-solid fa-book'),
]


@admin_required
def index(request):
    """Dashboard home with record counts for each management area."""
    client = client_for_request(request)
    stats = []
    failed = False
    for label, entity, icon in DASHBOARD_STATS:
        try:
            count = len(get_collection(client, entity).fetch_all())
        except TransportError as e:
            logger.warning(f"Dashboard count for {entity} failed: {e}")
            count = 'n/a'
            failed = True
        stats.append({'title': label, 'value': count, 'icon': icon})

    context = {
        'stats': stats,
        'error': "Some figures could not be loaded." if failed else None,
    }
    return htmx_render(request, 'core/index.html', 'core/partials/index_content.html', context)
