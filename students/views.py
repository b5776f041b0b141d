import logging

from django.contrib import messages
from django.http import Http404, HttpResponse
from django.shortcuts import redirect

from core.api import TransportError, client_for_request, get_collection
from core.screens import (
    CollectionScreen,
    Column,
    RowAction,
    collection_delete_cancel,
    collection_delete_confirm,
    collection_list,
)
from core.utils import admin_required, edit_remote_record, render_form, report_api_error

from .forms import StudentCounterForm, StudentCreateForm, StudentEditForm

logger = logging.getLogger(__name__)


def student_source(client):
    return get_collection(client, 'student')


def registration_source(client):
    return get_collection(client, 'registrationList')


STUDENT_SCREEN = CollectionScreen(
    name='students',
    title='Student Management',
    columns=[
        Column('id', 'ID'),
        Column('nickname', 'Nickname'),
        Column('gender', 'Gender'),
        Column('point', 'Points'),
        Column('heart', 'Hearts'),
        Column('level', 'Level'),
    ],
    source=student_source,
    url_prefix='students:student',
    create_label='Create Student',
    actions=[
        RowAction('Edit', 'students:student_edit'),
        RowAction('Add Point', 'students:student_point', style='button'),
        RowAction('Heart', 'students:student_heart', style='button'),
        RowAction('Level', 'students:student_level', style='button'),
    ],
    empty_message='No students found',
)

REGISTRATION_SCREEN = CollectionScreen(
    name='registrations',
    title='Registration List',
    columns=[
        Column('id', 'ID'),
        Column('username', 'Username'),
    ],
    source=registration_source,
    url_prefix='students:registration',
    empty_message='No registration entries found',
)

# field -> (endpoint, label) for the single-value student modifiers
STUDENT_COUNTERS = {
    'point': ('student/updatePoint', 'Point'),
    'heart': ('student/updateHeart', 'Heart'),
    'level': ('student/updateLevel', 'Level'),
}


# =============================================================================
# STUDENTS
# =============================================================================

@admin_required
def student_list(request):
    """Student list with search, sort and delete."""
    return collection_list(request, STUDENT_SCREEN)


@admin_required
def student_delete_confirm(request):
    if request.method != 'POST':
        return HttpResponse(status=405)
    return collection_delete_confirm(request, STUDENT_SCREEN)


@admin_required
def student_delete_cancel(request):
    if request.method != 'POST':
        return HttpResponse(status=405)
    return collection_delete_cancel(request, STUDENT_SCREEN)


@admin_required
def student_create(request):
    """Create a student together with the login account."""
    cancel_url = STUDENT_SCREEN.url('list')

    if request.method == 'GET':
        return render_form(request, StudentCreateForm(), 'Create Student', 'Create Student', cancel_url)

    if request.method != 'POST':
        return HttpResponse(status=405)

    form = StudentCreateForm(request.POST)
    if form.is_valid():
        try:
            student_source(client_for_request(request)).create(form.to_api())
        except TransportError as e:
            report_api_error(request, e, 'create student')
        else:
            messages.success(request, f"Student {form.cleaned_data['nickname']} created successfully.")
            return redirect('students:student_list')

    return render_form(request, form, 'Create Student', 'Create Student', cancel_url)


@admin_required
def student_edit(request, pk):
    """Edit an existing student."""
    return edit_remote_record(
        request,
        student_source(client_for_request(request)),
        pk,
        StudentEditForm,
        lambda student: f"Edit Student {student.get('nickname', pk)}",
        'Update Student',
        STUDENT_SCREEN.url('list'),
        'student',
    )


def _student_counter(request, pk, field):
    """Shared view for the point, heart and level modifiers."""
    if field not in STUDENT_COUNTERS:
        raise Http404
    endpoint, label = STUDENT_COUNTERS[field]
    title = f"Modify {label} for Student {pk}"
    cancel_url = STUDENT_SCREEN.url('list')

    if request.method == 'GET':
        form = StudentCounterForm(label=label, initial={'value': 0})
        return render_form(request, form, title, f"Save {label}", cancel_url)

    if request.method != 'POST':
        return HttpResponse(status=405)

    form = StudentCounterForm(request.POST, label=label)
    if form.is_valid():
        try:
            client_for_request(request).put(f'{endpoint}/{pk}', {field: form.cleaned_data['value']})
        except TransportError as e:
            report_api_error(request, e, f'modify {field}')
        else:
            messages.success(request, f"{label} updated.")
            return redirect('students:student_list')

    return render_form(request, form, title, f"Save {label}", cancel_url)


@admin_required
def student_point(request, pk):
    return _student_counter(request, pk, 'point')


@admin_required
def student_heart(request, pk):
    return _student_counter(request, pk, 'heart')


@admin_required
def student_level(request, pk):
    return _student_counter(request, pk, 'level')


# =============================================================================
# REGISTRATIONS
# =============================================================================

@admin_required
def registration_list(request):
    return collection_list(request, REGISTRATION_SCREEN)


@admin_required
def registration_delete_confirm(request):
    if request.method != 'POST':
        return HttpResponse(status=405)
    return collection_delete_confirm(request, REGISTRATION_SCREEN)


@admin_required
def registration_delete_cancel(request):
    if request.method != 'POST':
        return HttpResponse(status=405)
    return collection_delete_cancel(request, REGISTRATION_SCREEN)
