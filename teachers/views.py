from django.http import HttpResponse

from core.api import client_for_request, get_collection
from core.screens import (
    CollectionScreen,
    Column,
    RowAction,
    collection_delete_cancel,
    collection_delete_confirm,
    collection_list,
)
from core.utils import admin_required, edit_remote_record

from .forms import TeacherForm, parse_schedule_days


def teacher_source(client):
    return get_collection(client, 'teacher')


TEACHER_SCREEN = CollectionScreen(
    name='teachers',
    title='Teacher Management',
    columns=[
        Column('id', 'ID'),
        Column('user_id', 'User ID'),
        Column('scheduleDate', 'Schedule Days'),
    ],
    source=teacher_source,
    url_prefix='teachers:teacher',
    actions=[RowAction('Edit', 'teachers:teacher_edit')],
    empty_message='No teachers found',
)


@admin_required
def teacher_list(request):
    """Teacher list page with search, sort and delete."""
    return collection_list(request, TEACHER_SCREEN)


@admin_required
def teacher_delete_confirm(request):
    if request.method != 'POST':
        return HttpResponse(status=405)
    return collection_delete_confirm(request, TEACHER_SCREEN)


@admin_required
def teacher_delete_cancel(request):
    if request.method != 'POST':
        return HttpResponse(status=405)
    return collection_delete_cancel(request, TEACHER_SCREEN)


@admin_required
def teacher_edit(request, pk):
    """Edit the days a teacher is scheduled to work."""
    return edit_remote_record(
        request,
        teacher_source(client_for_request(request)),
        pk,
        TeacherForm,
        f"Edit Teacher {pk}",
        'Update Teacher',
        TEACHER_SCREEN.url('list'),
        'teacher',
        initial=lambda teacher: {'scheduleDate': parse_schedule_days(teacher.get('scheduleDate'))},
    )
