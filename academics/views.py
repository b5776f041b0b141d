"""
Attendance and vocabulary management.

Attendance lists and vocab lists each have a nested screen: the records
of one attendance list and the words of one vocab list.
"""
import logging

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
from core.utils import admin_required, create_remote_record, edit_remote_record

from .forms import AttendanceListForm, AttendanceRecordForm, VocabForm, VocabListForm

logger = logging.getLogger(__name__)


# =============================================================================
# DATA SOURCES
# =============================================================================

def attendance_list_source(client):
    return get_collection(client, 'attendanceList')


def attendance_record_source(client, list_id):
    return get_collection(client, 'attendanceRecord', all_path=f'attendanceRecord/list/{list_id}')


def vocab_list_source(client):
    return get_collection(client, 'vocabList')


def vocab_source(client, list_id):
    # Words of one list: all/search/sort are scoped, get/update/delete are not.
    return get_collection(
        client, 'vocab',
        list_path=f'vocab/list/{list_id}',
        all_path=f'vocab/list/{list_id}',
    )


# =============================================================================
# SCREENS
# =============================================================================

ATTENDANCE_SCREEN = CollectionScreen(
    name='attendance_lists',
    title='Attendance Management',
    columns=[
        Column('id', 'ID'),
        Column('title', 'Title'),
        Column('teacher_id', 'Created Teacher Id'),
        Column('status', 'Status'),
        Column('created_at', 'Created At'),
    ],
    source=attendance_list_source,
    url_prefix='academics:attendance',
    actions=[
        RowAction('Edit', 'academics:attendance_edit'),
        RowAction('Records', 'academics:attendance_record_list', pk_kwarg='list_id'),
    ],
    empty_message='No attendance lists found',
)

ATTENDANCE_RECORD_SCREEN = CollectionScreen(
    name='attendance_records',
    title='Attendance Records',
    columns=[
        Column('id', 'ID', sortable=False),
        Column('student_id', 'Student Id', sortable=False),
        Column('attended', 'Attended', sortable=False),
        Column('created_at', 'Created At', sortable=False),
    ],
    source=attendance_record_source,
    url_prefix='academics:attendance_record',
    searchable=False,
    actions=[RowAction('Mark', 'academics:attendance_record_edit')],
    empty_message='No attendance records found',
)

VOCAB_LIST_SCREEN = CollectionScreen(
    name='vocab_lists',
    title='Vocab Management',
    columns=[
        Column('id', 'ID'),
        Column('title', 'Title'),
        Column('description', 'Description'),
        Column('category', 'Category'),
        Column('word_count', 'Total Vocab in list'),
        Column('teacher_id', 'Created Teacher ID'),
        Column('created_at', 'Created At'),
    ],
    source=vocab_list_source,
    url_prefix='academics:vocab_list',
    create_label='Create Vocab List',
    actions=[
        RowAction('Edit', 'academics:vocab_list_edit'),
        RowAction('Words', 'academics:vocab_word_list', pk_kwarg='list_id'),
    ],
    empty_message='No vocab lists found',
)

VOCAB_WORD_SCREEN = CollectionScreen(
    name='vocab_words',
    title='Vocabulary',
    columns=[
        Column('id', 'ID'),
        Column('list_id', 'Vocab List Id'),
        Column('word', 'Word'),
        Column('translation', 'Translation'),
        Column('definition', 'Definition'),
        Column('part_of_speech', 'Type of Word'),
        Column('example_sentence', 'Example Sentences'),
        Column('synonyms', 'Synonyms'),
        Column('antonyms', 'Antonyms'),
        Column('created_by', 'Created By'),
        Column('created_at', 'Created At'),
    ],
    source=vocab_source,
    url_prefix='academics:vocab_word',
    create_label='Create Vocab',
    actions=[RowAction('Edit', 'academics:vocab_word_edit')],
    empty_message='No vocabs found',
)


# =============================================================================
# ATTENDANCE LISTS
# =============================================================================

@admin_required
def attendance_list(request):
    return collection_list(request, ATTENDANCE_SCREEN)


@admin_required
def attendance_delete_confirm(request):
    if request.method != 'POST':
        return HttpResponse(status=405)
    return collection_delete_confirm(request, ATTENDANCE_SCREEN)


@admin_required
def attendance_delete_cancel(request):
    if request.method != 'POST':
        return HttpResponse(status=405)
    return collection_delete_cancel(request, ATTENDANCE_SCREEN)


@admin_required
def attendance_edit(request, pk):
    return edit_remote_record(
        request,
        attendance_list_source(client_for_request(request)),
        pk,
        AttendanceListForm,
        title=f"Edit Attendance List {pk}",
        submit_label='Update Attendance List',
        list_url=ATTENDANCE_SCREEN.url('list'),
        noun='attendance list',
    )


# =============================================================================
# ATTENDANCE RECORDS
# =============================================================================

@admin_required
def attendance_record_list(request, list_id):
    return collection_list(request, ATTENDANCE_RECORD_SCREEN, list_id=list_id)


@admin_required
def attendance_record_delete_confirm(request, list_id):
    if request.method != 'POST':
        return HttpResponse(status=405)
    return collection_delete_confirm(request, ATTENDANCE_RECORD_SCREEN, list_id=list_id)


@admin_required
def attendance_record_delete_cancel(request, list_id):
    if request.method != 'POST':
        return HttpResponse(status=405)
    return collection_delete_cancel(request, ATTENDANCE_RECORD_SCREEN, list_id=list_id)


class _AttendedSource:
    """Reads a record normally but writes through the attended endpoint."""

    def __init__(self, client):
        self.client = client
        self.records = get_collection(client, 'attendanceRecord')

    def get(self, pk):
        return self.records.get(pk)

    def update(self, pk, data):
        return self.client.put(f'attendanceRecord/record/{pk}', data)


@admin_required
def attendance_record_edit(request, list_id, pk):
    """Mark a student as attended or absent."""
    return edit_remote_record(
        request,
        _AttendedSource(client_for_request(request)),
        pk,
        AttendanceRecordForm,
        title=f"Attendance Record {pk}",
        submit_label='Save',
        list_url=ATTENDANCE_RECORD_SCREEN.url('list', list_id=list_id),
        noun='attendance record',
    )


# =============================================================================
# VOCAB LISTS
# =============================================================================

@admin_required
def vocab_list_list(request):
    return collection_list(request, VOCAB_LIST_SCREEN)


@admin_required
def vocab_list_delete_confirm(request):
    if request.method != 'POST':
        return HttpResponse(status=405)
    return collection_delete_confirm(request, VOCAB_LIST_SCREEN)


@admin_required
def vocab_list_delete_cancel(request):
    if request.method != 'POST':
        return HttpResponse(status=405)
    return collection_delete_cancel(request, VOCAB_LIST_SCREEN)


@admin_required
def vocab_list_create(request):
    return create_remote_record(
        request,
        VocabListForm,
        title='Create Vocab List',
        submit_label='Create Vocab List',
        list_url=VOCAB_LIST_SCREEN.url('list'),
        noun='vocab list',
        create=vocab_list_source(client_for_request(request)).create,
    )


@admin_required
def vocab_list_edit(request, pk):
    return edit_remote_record(
        request,
        vocab_list_source(client_for_request(request)),
        pk,
        VocabListForm,
        title=f"Edit Vocab List {pk}",
        submit_label='Update Vocab List',
        list_url=VOCAB_LIST_SCREEN.url('list'),
        noun='vocab list',
    )


# =============================================================================
# VOCAB WORDS
# =============================================================================

@admin_required
def vocab_word_list(request, list_id):
    return collection_list(request, VOCAB_WORD_SCREEN, list_id=list_id)


@admin_required
def vocab_word_delete_confirm(request, list_id):
    if request.method != 'POST':
        return HttpResponse(status=405)
    return collection_delete_confirm(request, VOCAB_WORD_SCREEN, list_id=list_id)


@admin_required
def vocab_word_delete_cancel(request, list_id):
    if request.method != 'POST':
        return HttpResponse(status=405)
    return collection_delete_cancel(request, VOCAB_WORD_SCREEN, list_id=list_id)


@admin_required
def vocab_word_create(request, list_id):
    words = vocab_source(client_for_request(request), list_id)
    return create_remote_record(
        request,
        VocabForm,
        title='Create Vocab',
        submit_label='Create Vocab',
        list_url=VOCAB_WORD_SCREEN.url('list', list_id=list_id),
        noun='vocab',
        create=lambda data: words.create(data, path=f'vocab/list/{list_id}'),
    )


@admin_required
def vocab_word_edit(request, list_id, pk):
    return edit_remote_record(
        request,
        vocab_source(client_for_request(request), list_id),
        pk,
        VocabForm,
        title=f"Edit Vocab {pk}",
        submit_label='Update Vocab',
        list_url=VOCAB_WORD_SCREEN.url('list', list_id=list_id),
        noun='vocab',
    )
