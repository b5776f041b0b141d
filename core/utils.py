import logging
from functools import wraps

from django.contrib import messages
from django.http import HttpResponse
from django.shortcuts import redirect, render
from django.urls import reverse

from core.api import (
    API_TOKEN_SESSION_KEY,
    API_USER_SESSION_KEY,
    REDIRECT_AFTER_LOGIN_SESSION_KEY,
    TransportError,
)

logger = logging.getLogger(__name__)


def htmx_render(request, full_template, partial_template, context=None):
    """
    Render full template for regular requests, partial for HTMX requests.
    Progressive enhancement: works with or without JavaScript.
    """
    context = context or {}
    template = partial_template if getattr(request, 'htmx', False) else full_template
    return render(request, template, context)


def get_api_user(request):
    """The user record returned by the API at login, or None."""
    return request.session.get(API_USER_SESSION_KEY)


def is_logged_in(request):
    return bool(request.session.get(API_TOKEN_SESSION_KEY))


def login_redirect(request):
    """Send the browser to the login page; HTMX requests get an ``HX-Redirect``."""
    if getattr(request, 'htmx', False):
        response = HttpResponse(status=200)
        response['HX-Redirect'] = reverse('accounts:login')
        return response
    return redirect('accounts:login')


def admin_required(view_func):
    """Decorator to require a stored API token; otherwise go to the login page."""
    @wraps(view_func)
    def _wrapped_view(request, *args, **kwargs):
        if not is_logged_in(request):
            request.session[REDIRECT_AFTER_LOGIN_SESSION_KEY] = request.path
            return login_redirect(request)
        return view_func(request, *args, **kwargs)
    return _wrapped_view


def report_api_error(request, error, action):
    """Show the API's message for a failed submit, or a generic retry hint."""
    if getattr(error, 'message', None):
        messages.error(request, f"Error: {error.message}")
    else:
        messages.error(request, f"Failed to {action}. Please try again.")


def render_form(request, form, title, submit_label, cancel_url, **extra):
    """Render the shared create/edit form page."""
    context = {
        'form': form,
        'title': title,
        'submit_label': submit_label,
        'cancel_url': cancel_url,
    }
    context.update(extra)
    return htmx_render(request, 'core/form.html', 'core/partials/form_content.html', context)


def form_payload(form):
    """Body for the API: the form's ``to_api()`` if it has one, else cleaned_data."""
    if hasattr(form, 'to_api'):
        return form.to_api()
    return dict(form.cleaned_data)


def edit_remote_record(request, source, pk, form_class, title, submit_label, list_url, noun,
                       initial=None, form_kwargs=None, save=None):
    """
    Load a record from the API into ``form_class`` and PUT it back on submit.

    A record that cannot be loaded sends the browser back to ``list_url``.

    Optional hooks, each called with the loaded record:
        title: may be a callable ``title(record)``
        initial: ``initial(record)`` returning the form's initial data;
            defaults to the record's values for the form's fields
        save: ``save(form, record)`` instead of ``source.update(pk, payload)``
    ``form_kwargs`` are passed to every form instance (e.g. ``roles``).
    """
    try:
        record = source.get(pk) or {}
    except TransportError as e:
        logger.warning(f"Fetching {noun} {pk} failed: {e}")
        messages.error(request, f"Failed to load {noun} data. Please try again.")
        return redirect(list_url)

    if callable(title):
        title = title(record)
    form_kwargs = form_kwargs or {}

    if request.method == 'GET':
        if initial is None:
            data = {name: record.get(name) for name in form_class.base_fields}
        else:
            data = initial(record)
        form = form_class(initial=data, **form_kwargs)
        return render_form(request, form, title, submit_label, list_url, record=record)

    if request.method != 'POST':
        return HttpResponse(status=405)

    form = form_class(request.POST, **form_kwargs)
    if form.is_valid():
        try:
            if save is None:
                source.update(pk, form_payload(form))
            else:
                save(form, record)
        except TransportError as e:
            report_api_error(request, e, f'update {noun}')
        else:
            messages.success(request, f"{noun.capitalize()} details updated.")
            return redirect(list_url)

    return render_form(request, form, title, submit_label, list_url, record=record)


def create_remote_record(request, form_class, title, submit_label, list_url, noun, create):
    """
    Validate ``form_class`` and hand its payload to ``create``.

    ``create`` is a callable taking the payload, usually
    ``RemoteCollection.create``.
    """
    if request.method == 'GET':
        return render_form(request, form_class(), title, submit_label, list_url)

    if request.method != 'POST':
        return HttpResponse(status=405)

    form = form_class(request.POST)
    if form.is_valid():
        try:
            create(form_payload(form))
        except TransportError as e:
            report_api_error(request, e, f'create {noun}')
        else:
            messages.success(request, f"{noun.capitalize()} created successfully.")
            return redirect(list_url)

    return render_form(request, form, title, submit_label, list_url)
