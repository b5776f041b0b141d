from datetime import datetime

from django import template
from django.urls import reverse, NoReverseMatch

from core.screens import sort_indicator as _sort_indicator

register = template.Library()


# Sidebar navigation, in display order
NAVIGATION_CONFIG = [
    {
        'label': 'Dashboard',
        'icon': 'fa-solid fa-gauge',
        'url_name': 'core:index',
    },
    {
        'label': 'User Management',
        'icon': 'fa-solid fa-users',
        'url_name': 'accounts:user_list',
    },
    {
        'label': 'Student Management',
        'icon': 'fa-solid fa-user-graduate',
        'url_name': 'students:student_list',
    },
    {
        'label': 'Teacher Management',
        'icon': 'fa-solid fa-chalkboard-user',
        'url_name': 'teachers:teacher_list',
    },
    {
        'label': 'Attendance Management',
        'icon': 'fa-solid fa-clipboard-user',
        'url_name': 'academics:attendance_list',
    },
    {
        'label': 'Vocab Management',
        'icon': 'fa-solid fa-book',
        'url_name': 'academics:vocab_list_list',
    },
    {
        'label': 'Salary Management',
        'icon': 'fa-solid fa-money-bill',
        'url_name': 'finance:salary_list',
    },
    {
        'label': 'Registration List',
        'icon': 'fa-solid fa-clipboard-list',
        'url_name': 'students:registration_list',
    },
]

STATUS_CLASSES = {
    'active': 'badge-success',
    'completed': 'badge-info',
    'paid': 'badge-success',
    'pending': 'badge-warning',
    'closed': 'badge-neutral',
}


def resolve_url(url_name):
    """Safely resolve URL name to URL path."""
    try:
        return reverse(url_name)
    except NoReverseMatch:
        return '#'


def is_url_active(request, url):
    """Check if the current request path matches the nav item."""
    if url == '#':
        return False
    current_path = request.path
    # Exact match when either URL or current path is root
    if url == '/' or current_path == '/':
        return current_path == url
    return current_path == url or current_path.startswith(url.rstrip('/') + '/')


@register.simple_tag(takes_context=True)
def get_navigation_items(context):
    """
    Returns the sidebar items, marking the current page as active.
    """
    request = context.get('request')
    if not request:
        return []

    nav_items = []
    for item in NAVIGATION_CONFIG:
        url = resolve_url(item['url_name'])
        nav_items.append({
            'label': item['label'],
            'icon': item['icon'],
            'url': url,
            'is_active': is_url_active(request, url),
        })
    return nav_items


@register.simple_tag
def sort_indicator(sort, column):
    """
    Arrow for a column header.
    Usage: {% sort_indicator sort column.key %}
    """
    return _sort_indicator(sort, column)


@register.filter
def status_badge(status):
    """CSS class for a status value; unknown statuses get the neutral badge."""
    return STATUS_CLASSES.get(str(status or '').lower(), 'badge-neutral')


@register.filter
def api_date(value):
    """Render an ISO timestamp from the API as a date, leaving other values alone."""
    if not value or not isinstance(value, str):
        return value
    try:
        return datetime.fromisoformat(value.replace('Z', '+00:00')).date()
    except ValueError:
        return value


@register.inclusion_tag('core/partials/stat_card.html')
def stat_card(title, value, icon, color='primary'):
    """
    Render a stat card component.
    Usage: {% stat_card "Students" 12 "fa-solid fa-users" "primary" %}
    """
    return {
        'title': title,
        'value': value,
        'icon': icon,
        'color': color,
    }
