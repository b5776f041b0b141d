import logging

from django.conf import settings
from django.contrib import messages
from django.http import HttpResponse
from django.shortcuts import redirect, render
from django.utils.http import url_has_allowed_host_and_scheme

from core.api import (
    API_TOKEN_SESSION_KEY,
    API_USER_SESSION_KEY,
    REDIRECT_AFTER_LOGIN_SESSION_KEY,
    ApiClient,
    TransportError,
    client_for_request,
    get_collection,
    get_roles,
    logout as api_logout,
)
from core.screens import (
    CollectionScreen,
    Column,
    RowAction,
    collection_delete_cancel,
    collection_delete_confirm,
    collection_list,
)
from core.utils import admin_required, edit_remote_record, is_logged_in, render_form, report_api_error

from .forms import LoginForm, UserCreateForm, UserEditForm

logger = logging.getLogger(__name__)


def user_source(client):
    return get_collection(client, 'user')


USER_SCREEN = CollectionScreen(
    name='users',
    title='User Management',
    columns=[
        Column('id', 'ID'),
        Column('username', 'Username'),
        Column('role_name', 'Role'),
    ],
    source=user_source,
    url_prefix='accounts:user',
    create_label='Create User',
    actions=[RowAction('Edit', 'accounts:user_edit')],
    empty_message='No users found',
)


# =============================================================================
# LOGIN / LOGOUT
# =============================================================================

def login_view(request):
    """Login against the API and keep the bearer token in the session."""
    if is_logged_in(request):
        return redirect('core:index')

    # No 401 hook here: bad credentials are a form error, not an expired session.
    client = ApiClient(settings.API_BASE_URL, timeout=settings.API_TIMEOUT)

    if request.method != 'POST':
        return render(request, 'accounts/login.html', {'form': LoginForm(client)})

    form = LoginForm(client, data=request.POST)
    if not form.is_valid():
        return render(request, 'accounts/login.html', {'form': form})

    payload = form.get_payload()
    request.session.cycle_key()
    request.session[API_TOKEN_SESSION_KEY] = payload['token']
    request.session[API_USER_SESSION_KEY] = payload.get('user')
    logger.info(f"Dashboard login: {form.cleaned_data['username']}")

    next_url = request.session.pop(REDIRECT_AFTER_LOGIN_SESSION_KEY, None)
    if next_url and url_has_allowed_host_and_scheme(next_url, allowed_hosts={request.get_host()}):
        return redirect(next_url)
    return redirect('core:index')


def logout_view(request):
    """Tell the API we are leaving, then drop the session either way."""
    if request.method != 'POST':
        return HttpResponse(status=405)

    if is_logged_in(request):
        try:
            api_logout(client_for_request(request))
        except TransportError as e:
            logger.warning(f"API logout failed: {e}")

    request.session.flush()
    return redirect('accounts:login')


# =============================================================================
# USERS
# =============================================================================

@admin_required
def user_list(request):
    return collection_list(request, USER_SCREEN)


@admin_required
def user_delete_confirm(request):
    if request.method != 'POST':
        return HttpResponse(status=405)
    return collection_delete_confirm(request, USER_SCREEN)


@admin_required
def user_delete_cancel(request):
    if request.method != 'POST':
        return HttpResponse(status=405)
    return collection_delete_cancel(request, USER_SCREEN)


def _load_roles(request, client):
    try:
        return get_roles(client)
    except TransportError as e:
        logger.warning(f"Fetching roles failed: {e}")
        messages.warning(request, "Roles could not be loaded.")
        return []


@admin_required
def user_create(request):
    """Create a new user."""
    client = client_for_request(request)
    roles = _load_roles(request, client)
    cancel_url = USER_SCREEN.url('list')

    if request.method == 'GET':
        form = UserCreateForm(roles=roles)
        return render_form(request, form, 'Create User', 'Create User', cancel_url)

    if request.method != 'POST':
        return HttpResponse(status=405)

    form = UserCreateForm(request.POST, roles=roles)
    if form.is_valid():
        try:
            user_source(client).create(form.to_api())
        except TransportError as e:
            report_api_error(request, e, 'create user')
        else:
            messages.success(request, f"User {form.cleaned_data['username']} created successfully.")
            return redirect('accounts:user_list')

    return render_form(request, form, 'Create User', 'Create User', cancel_url)


@admin_required
def user_edit(request, pk):
    """Edit a user's name; a changed role goes through the role endpoint."""
    client = client_for_request(request)
    users = user_source(client)

    def save(form, user):
        users.update(pk, {'username': form.cleaned_data['username']})
        role_id = int(form.cleaned_data['role_id'])
        if str(role_id) != str(user.get('role_id')):
            client.put(f'user/{pk}/role', {'role_id': role_id})

    return edit_remote_record(
        request,
        users,
        pk,
        UserEditForm,
        lambda user: f"Edit User {user.get('username', pk)}",
        'Update User',
        USER_SCREEN.url('list'),
        'user',
        initial=lambda user: {'username': user.get('username', ''), 'role_id': str(user.get('role_id', ''))},
        form_kwargs={'roles': _load_roles(request, client)},
        save=save,
    )
