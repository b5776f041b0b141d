from django.test import SimpleTestCase
from django.urls import reverse

from core.api import TransportError
from core.tests import ApiViewTestCase
from teachers.forms import TeacherForm, parse_schedule_days


class ScheduleDaysTests(SimpleTestCase):

    def test_comma_string(self):
        self.assertEqual(parse_schedule_days('Friday, Monday'), ['Monday', 'Friday'])

    def test_list_keeps_week_order(self):
        self.assertEqual(parse_schedule_days(['Sunday', 'Tuesday']), ['Tuesday', 'Sunday'])

    def test_empty_and_unknown(self):
        self.assertEqual(parse_schedule_days(None), [])
        self.assertEqual(parse_schedule_days('Funday'), [])

    def test_form_payload(self):
        form = TeacherForm({'scheduleDate': ['Wednesday', 'Monday']})
        self.assertTrue(form.is_valid())
        self.assertEqual(form.to_api(), {'scheduleDate': ['Monday', 'Wednesday']})


class TeacherViewTests(ApiViewTestCase):

    def setUp(self):
        super().setUp()
        self.route('GET', 'teacher/all', [
            {'id': 4, 'user_id': 11, 'scheduleDate': ['Monday', 'Thursday']},
        ])

    def test_list_joins_schedule_days(self):
        response = self.client.get(reverse('teachers:teacher_list'))
        self.assertContains(response, 'Monday, Thursday')

    def test_sort_by_schedule(self):
        self.client.get(reverse('teachers:teacher_list'), {'sort': 'scheduleDate'})
        self.assertEqual(
            self.calls_to('GET', 'teacher/sort')[0][2],
            {'column': 'scheduleDate', 'order': 'ASC'},
        )

    def test_search_uses_q(self):
        self.client.get(reverse('teachers:teacher_list'), {'q': '11'})
        self.assertEqual(self.calls_to('GET', 'teacher/search')[0][2], {'q': '11'})

    def test_edit_prefills_days(self):
        self.route('GET', 'teacher/4', {'id': 4, 'scheduleDate': 'Monday,Thursday'})
        response = self.client.get(reverse('teachers:teacher_edit', args=[4]))
        self.assertEqual(response.context['form'].initial['scheduleDate'], ['Monday', 'Thursday'])

    def test_edit_saves_days(self):
        self.route('GET', 'teacher/4', {'id': 4, 'scheduleDate': []})
        response = self.client.post(reverse('teachers:teacher_edit', args=[4]), {'scheduleDate': ['Friday']})
        self.assertRedirects(response, reverse('teachers:teacher_list'), fetch_redirect_response=False)
        self.assertEqual(self.calls_to('PUT', 'teacher/4')[0][3], {'scheduleDate': ['Friday']})

    def test_edit_server_error(self):
        self.route('GET', 'teacher/4', {'id': 4})
        self.route('PUT', 'teacher/4', TransportError("Invalid schedule", status_code=400))
        response = self.client.post(reverse('teachers:teacher_edit', args=[4]), {'scheduleDate': ['Friday']})
        self.assertContains(response, "Error: Invalid schedule")
