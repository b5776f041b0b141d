from django.test import SimpleTestCase
from django.urls import reverse

from core.api import TransportError
from core.tests import ApiViewTestCase
from finance.forms import PaymentStatusForm, SalaryListCreateForm, SalaryListEditForm

SALARY_LISTS = [
    {'id': 1, 'title': 'May', 'month_year': '2024-05', 'daily_rate': 50, 'status': 'active', 'total_records': 4},
    {'id': 2, 'title': 'April', 'month_year': '2024-04', 'daily_rate': 45, 'status': 'completed', 'total_records': 4},
]


class SalaryFormTests(SimpleTestCase):

    def test_create_requires_month_and_rate(self):
        form = SalaryListCreateForm({'month_year': '', 'daily_rate': 'abc'})
        self.assertFalse(form.is_valid())
        self.assertEqual(form.errors['month_year'], ["Month-Year is required"])
        self.assertEqual(form.errors['daily_rate'], ["Valid daily rate is required"])

    def test_create_payload(self):
        form = SalaryListCreateForm({'month_year': '2024-06', 'daily_rate': '52.5'})
        self.assertTrue(form.is_valid())
        self.assertEqual(form.to_api(), {'monthYear': '2024-06', 'dailyRate': 52.5})

    def test_whole_rate_sent_as_int(self):
        form = SalaryListCreateForm({'month_year': '2024-06', 'daily_rate': '50'})
        self.assertTrue(form.is_valid())
        self.assertEqual(form.to_api()['dailyRate'], 50)

    def test_edit_requires_everything(self):
        form = SalaryListEditForm({})
        self.assertFalse(form.is_valid())
        self.assertEqual(
            set(form.errors),
            {'title', 'month_year', 'daily_rate', 'status', 'total_records'},
        )

    def test_payment_status_choices(self):
        self.assertFalse(PaymentStatusForm({'payment_status': 'lost'}).is_valid())
        self.assertTrue(PaymentStatusForm({'payment_status': 'paid'}).is_valid())


class SalaryViewTests(ApiViewTestCase):

    def setUp(self):
        super().setUp()
        self.url = reverse('finance:salary_list')
        self.route('GET', 'salaryList/all', SALARY_LISTS)

    def test_list(self):
        response = self.client.get(self.url)
        self.assertContains(response, '2024-05')
        self.assertContains(response, 'Create Salary List')

    def test_search_uses_query(self):
        self.route('GET', 'salaryList/search', SALARY_LISTS)
        response = self.client.get(self.url, {'q': 'april'})
        self.assertEqual(self.calls_to('GET', 'salaryList/search')[0][2], {'query': 'april'})
        self.assertNotContains(response, '2024-05')

    def test_create(self):
        response = self.client.post(
            reverse('finance:salary_create'),
            {'month_year': '2024-06', 'daily_rate': '50'},
        )
        self.assertRedirects(response, self.url, fetch_redirect_response=False)
        self.assertEqual(self.calls_to('POST', 'salaryList')[0][3], {'monthYear': '2024-06', 'dailyRate': 50})

    def test_edit_prefills_from_api(self):
        self.route('GET', 'salaryList/1', SALARY_LISTS[0])
        response = self.client.get(reverse('finance:salary_edit', args=[1]))
        self.assertEqual(response.context['form'].initial['month_year'], '2024-05')

    def test_edit_server_error(self):
        self.route('GET', 'salaryList/1', SALARY_LISTS[0])
        self.route('PUT', 'salaryList/1', TransportError())
        response = self.client.post(reverse('finance:salary_edit', args=[1]), {
            'title': 'May', 'month_year': '2024-05', 'daily_rate': '55',
            'status': 'completed', 'total_records': '4',
        })
        self.assertContains(response, "Failed to update salary list. Please try again.")

    def test_delete_failure_message(self):
        self.client.get(self.url)
        self.client.get(self.url, {'delete': '1'})
        self.route('DELETE', 'salaryList/1', TransportError("List has records", status_code=409))
        response = self.client.post(reverse('finance:salary_delete_confirm'))
        self.assertContains(response, "Failed to delete record 1: List has records")


class SalaryRecordViewTests(ApiViewTestCase):

    def test_records_of_one_list(self):
        self.route('GET', 'salaryRecord/list/1', [
            {'id': 9, 'teacher_id': 4, 'days_worked': 20, 'amount': 1000, 'payment_status': 'pending'},
        ])
        response = self.client.get(reverse('finance:salary_record_list', args=[1]))
        self.assertContains(response, 'badge-warning')
        self.assertContains(response, reverse('finance:salary_record_payment', args=[1, 9]))

    def test_update_payment_status(self):
        self.route('GET', 'salaryRecord/9', {'id': 9, 'payment_status': 'pending'})
        response = self.client.post(
            reverse('finance:salary_record_payment', args=[1, 9]),
            {'payment_status': 'paid'},
        )
        self.assertRedirects(
            response,
            reverse('finance:salary_record_list', args=[1]),
            fetch_redirect_response=False,
        )
        self.assertEqual(
            self.calls_to('PUT', 'salaryRecord/paymentStatus/record/9')[0][3],
            {'payment_status': 'paid'},
        )
