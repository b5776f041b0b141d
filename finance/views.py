"""
Salary management: salary lists, and the salary records of one list.
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

from .forms import PaymentStatusForm, SalaryListCreateForm, SalaryListEditForm

logger = logging.getLogger(__name__)


def salary_list_source(client):
    return get_collection(client, 'salaryList')


def salary_record_source(client, list_id):
    return get_collection(client, 'salaryRecord', all_path=f'salaryRecord/list/{list_id}')


class PaymentStatusSource:
    """Salary record reads, with writes going to the payment status endpoint."""

    def __init__(self, client):
        self.client = client
        self.records = get_collection(client, 'salaryRecord')

    def get(self, pk):
        return self.records.get(pk)

    def update(self, pk, data):
        return self.client.put(f'salaryRecord/paymentStatus/record/{pk}', data)


SALARY_SCREEN = CollectionScreen(
    name='salary_lists',
    title='Salary Management',
    columns=[
        Column('id', 'ID'),
        Column('title', 'Title'),
        Column('month_year', 'Month-Year'),
        Column('daily_rate', 'Daily Rate'),
        Column('status', 'Status'),
        Column('total_records', 'Total Records'),
        Column('created_at', 'Created At'),
    ],
    source=salary_list_source,
    url_prefix='finance:salary',
    create_label='Create Salary List',
    actions=[
        RowAction('Edit', 'finance:salary_edit'),
        RowAction('Records', 'finance:salary_record_list', pk_kwarg='list_id'),
    ],
    empty_message='No salary lists found',
)

SALARY_RECORD_SCREEN = CollectionScreen(
    name='salary_records',
    title='Salary Records',
    columns=[
        Column('id', 'ID', sortable=False),
        Column('teacher_id', 'Teacher Id', sortable=False),
        Column('days_worked', 'Days Worked', sortable=False),
        Column('amount', 'Amount', sortable=False),
        Column('payment_status', 'Payment Status', sortable=False),
    ],
    source=salary_record_source,
    url_prefix='finance:salary_record',
    searchable=False,
    actions=[RowAction('Payment', 'finance:salary_record_payment')],
    empty_message='No salary records found',
)


# =============================================================================
# SALARY LISTS
# =============================================================================

@admin_required
def salary_list(request):
    return collection_list(request, SALARY_SCREEN)


@admin_required
def salary_delete_confirm(request):
    if request.method != 'POST':
        return HttpResponse(status=405)
    return collection_delete_confirm(request, SALARY_SCREEN)


@admin_required
def salary_delete_cancel(request):
    if request.method != 'POST':
        return HttpResponse(status=405)
    return collection_delete_cancel(request, SALARY_SCREEN)


@admin_required
def salary_create(request):
    return create_remote_record(
        request,
        SalaryListCreateForm,
        title='Create Salary List',
        submit_label='Create Salary List',
        list_url=SALARY_SCREEN.url('list'),
        noun='salary list',
        create=salary_list_source(client_for_request(request)).create,
    )


@admin_required
def salary_edit(request, pk):
    return edit_remote_record(
        request,
        salary_list_source(client_for_request(request)),
        pk,
        SalaryListEditForm,
        title=f"Edit Salary List {pk}",
        submit_label='Update Salary List',
        list_url=SALARY_SCREEN.url('list'),
        noun='salary list',
    )


# =============================================================================
# SALARY RECORDS
# =============================================================================

@admin_required
def salary_record_list(request, list_id):
    return collection_list(request, SALARY_RECORD_SCREEN, list_id=list_id)


@admin_required
def salary_record_delete_confirm(request, list_id):
    if request.method != 'POST':
        return HttpResponse(status=405)
    return collection_delete_confirm(request, SALARY_RECORD_SCREEN, list_id=list_id)


@admin_required
def salary_record_delete_cancel(request, list_id):
    if request.method != 'POST':
        return HttpResponse(status=405)
    return collection_delete_cancel(request, SALARY_RECORD_SCREEN, list_id=list_id)


@admin_required
def salary_record_payment(request, list_id, pk):
    """Mark a salary record as paid or pending."""
    return edit_remote_record(
        request,
        PaymentStatusSource(client_for_request(request)),
        pk,
        PaymentStatusForm,
        title=f"Payment Status of Record {pk}",
        submit_label='Update Payment Status',
        list_url=SALARY_RECORD_SCREEN.url('list', list_id=list_id),
        noun='payment status',
    )
