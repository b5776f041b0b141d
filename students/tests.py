from django.test import SimpleTestCase
from django.urls import reverse

from core.api import TransportError
from core.tests import ApiViewTestCase
from students.forms import StudentCounterForm, StudentCreateForm, StudentEditForm

STUDENT_DATA = {
    'userFullName': 'Amy Pond',
    'nickname': 'amy',
    'username': 'amy01',
    'password': 'secret1',
    'age': '9',
    'gender': 'Girl',
    'address': 'Leadworth',
}

STUDENTS = [
    {'id': 1, 'nickname': 'amy', 'gender': 'Girl', 'point': 10, 'heart': 3, 'level': 2},
    {'id': 2, 'nickname': 'rory', 'gender': 'Boy', 'point': 4, 'heart': 5, 'level': 1},
]


class StudentFormTests(SimpleTestCase):

    def test_valid_create(self):
        form = StudentCreateForm(STUDENT_DATA)
        self.assertTrue(form.is_valid(), form.errors)
        self.assertEqual(form.to_api()['age'], 9)

    def test_age_must_be_positive(self):
        form = StudentCreateForm({**STUDENT_DATA, 'age': '0'})
        self.assertFalse(form.is_valid())
        self.assertEqual(form.errors['age'], ["Age must be a positive number"])

    def test_password_length(self):
        form = StudentCreateForm({**STUDENT_DATA, 'password': 'abc'})
        self.assertFalse(form.is_valid())
        self.assertIn('password', form.errors)

    def test_required_messages(self):
        form = StudentCreateForm({})
        self.assertFalse(form.is_valid())
        self.assertEqual(form.errors['nickname'], ["Nickname is required"])
        self.assertEqual(form.errors['age'], ["Age is required"])

    def test_edit_rejects_negative_points(self):
        data = {k: v for k, v in STUDENT_DATA.items() if k not in ('username', 'password')}
        form = StudentEditForm({**data, 'point': '-1'})
        self.assertFalse(form.is_valid())
        self.assertEqual(form.errors['point'], ["Points must be a non-negative number"])

    def test_edit_drops_blank_counters(self):
        data = {k: v for k, v in STUDENT_DATA.items() if k not in ('username', 'password')}
        form = StudentEditForm({**data, 'level': '3'})
        self.assertTrue(form.is_valid(), form.errors)
        payload = form.to_api()
        self.assertEqual(payload['level'], 3)
        self.assertNotIn('point', payload)

    def test_counter_label(self):
        form = StudentCounterForm({}, label='Heart')
        self.assertFalse(form.is_valid())
        self.assertEqual(form.errors['value'], ["Heart is required"])


class StudentListViewTests(ApiViewTestCase):

    def setUp(self):
        super().setUp()
        self.url = reverse('students:student_list')
        self.route('GET', 'student/all', STUDENTS)

    def test_list_shows_actions(self):
        response = self.client.get(self.url)
        self.assertContains(response, 'rory')
        self.assertContains(response, reverse('students:student_point', args=[2]))
        self.assertContains(response, reverse('students:student_edit', args=[1]))

    def test_search_uses_q_parameter(self):
        self.route('GET', 'student/search', STUDENTS)
        response = self.client.get(self.url, {'q': 'ror'})
        self.assertEqual(self.calls_to('GET', 'student/search')[0][2], {'q': 'ror'})
        self.assertNotContains(response, 'amy')

    def test_delete_flow(self):
        self.client.get(self.url)
        self.client.get(self.url, {'delete': '1'})
        self.client.post(reverse('students:student_delete_confirm'))
        self.assertEqual(len(self.calls_to('DELETE', 'student/1')), 1)


class StudentFormViewTests(ApiViewTestCase):

    def test_create(self):
        response = self.client.post(reverse('students:student_create'), STUDENT_DATA)
        self.assertRedirects(response, reverse('students:student_list'), fetch_redirect_response=False)
        payload = self.calls_to('POST', 'student')[0][3]
        self.assertEqual(payload['username'], 'amy01')
        self.assertEqual(payload['age'], 9)

    def test_create_failure_message(self):
        self.route('POST', 'student', TransportError())
        response = self.client.post(reverse('students:student_create'), STUDENT_DATA)
        self.assertContains(response, "Failed to create student. Please try again.")

    def test_edit_prefills_form(self):
        self.route('GET', 'student/1', {**STUDENTS[0], 'userFullName': 'Amy Pond', 'age': 9, 'address': 'x'})
        response = self.client.get(reverse('students:student_edit', args=[1]))
        self.assertContains(response, 'Amy Pond')
        self.assertContains(response, 'Edit Student amy')

    def test_point_modifier(self):
        response = self.client.post(reverse('students:student_point', args=[2]), {'value': '5'})
        self.assertRedirects(response, reverse('students:student_list'), fetch_redirect_response=False)
        self.assertEqual(self.calls_to('PUT', 'student/updatePoint/2')[0][3], {'point': 5})

    def test_level_modifier_validation(self):
        response = self.client.post(reverse('students:student_level', args=[2]), {'value': ''})
        self.assertContains(response, "Level is required")
        self.assertEqual(self.calls_to('PUT', 'student/updateLevel/2'), [])


class RegistrationListViewTests(ApiViewTestCase):

    def test_search_uses_query_parameter(self):
        self.route('GET', 'registrationList/search', [{'id': 7, 'username': 'newbie'}])
        response = self.client.get(reverse('students:registration_list'), {'q': 'new'})
        self.assertEqual(self.calls_to('GET', 'registrationList/search')[0][2], {'query': 'new'})
        self.assertContains(response, 'newbie')

    def test_delete_entry(self):
        self.route('GET', 'registrationList/all', [{'id': 7, 'username': 'newbie'}])
        url = reverse('students:registration_list')
        self.client.get(url)
        self.client.get(url, {'delete': '7'})
        self.client.post(reverse('students:registration_delete_confirm'))
        self.assertEqual(len(self.calls_to('DELETE', 'registrationList/7')), 1)
