from django.test import SimpleTestCase
from django.urls import reverse

from core.api import TransportError
from core.tests import ApiViewTestCase
from academics.forms import AttendanceListForm, VocabForm, VocabListForm

ATTENDANCE_LISTS = [
    {'id': 1, 'title': 'Monday class', 'teacher_id': 4, 'status': 'active', 'created_at': '2024-05-06T08:00:00Z'},
    {'id': 2, 'title': 'Tuesday class', 'teacher_id': 4, 'status': 'closed', 'created_at': '2024-05-07T08:00:00Z'},
]

VOCAB_WORDS = [
    {'id': 10, 'list_id': 3, 'word': 'apple', 'translation': 'manzana', 'part_of_speech': 'noun'},
    {'id': 11, 'list_id': 3, 'word': 'run', 'translation': 'correr', 'part_of_speech': 'verb'},
]


class AcademicsFormTests(SimpleTestCase):

    def test_attendance_list_requires_status(self):
        form = AttendanceListForm({'title': 'Monday'})
        self.assertFalse(form.is_valid())
        self.assertEqual(form.errors['status'], ["Status is required"])

    def test_vocab_list_required_fields(self):
        form = VocabListForm({'title': 'Fruit'})
        self.assertFalse(form.is_valid())
        self.assertEqual(form.errors['description'], ["Description is required"])
        self.assertEqual(form.errors['category'], ["Category is required"])

    def test_vocab_word_only_needs_word_and_type(self):
        form = VocabForm({'word': 'pear', 'part_of_speech': 'noun'})
        self.assertTrue(form.is_valid(), form.errors)


class AttendanceViewTests(ApiViewTestCase):

    def setUp(self):
        super().setUp()
        self.url = reverse('academics:attendance_list')
        self.route('GET', 'attendanceList/all', ATTENDANCE_LISTS)

    def test_list_formats_dates_and_links_records(self):
        response = self.client.get(self.url)
        self.assertContains(response, 'Monday class')
        self.assertContains(response, 'badge-success')
        self.assertContains(response, reverse('academics:attendance_record_list', args=[2]))
        self.assertNotContains(response, '2024-05-06T08:00:00Z')

    def test_sort_by_created_at(self):
        self.client.get(self.url, {'sort': 'created_at'})
        self.client.get(self.url, {'sort': 'created_at'})
        self.assertEqual(
            [call[2] for call in self.calls_to('GET', 'attendanceList/sort')],
            [{'column': 'created_at', 'order': 'ASC'}, {'column': 'created_at', 'order': 'DESC'}],
        )

    def test_delete(self):
        self.client.get(self.url)
        self.client.get(self.url, {'delete': '2'})
        self.client.post(reverse('academics:attendance_delete_confirm'))
        self.assertEqual(len(self.calls_to('DELETE', 'attendanceList/2')), 1)

    def test_edit(self):
        self.route('GET', 'attendanceList/1', ATTENDANCE_LISTS[0])
        response = self.client.post(
            reverse('academics:attendance_edit', args=[1]),
            {'title': 'Monday morning', 'status': 'closed'},
        )
        self.assertRedirects(response, self.url, fetch_redirect_response=False)
        self.assertEqual(
            self.calls_to('PUT', 'attendanceList/1')[0][3],
            {'title': 'Monday morning', 'status': 'closed'},
        )


class AttendanceRecordViewTests(ApiViewTestCase):

    def setUp(self):
        super().setUp()
        self.url = reverse('academics:attendance_record_list', args=[1])
        self.route('GET', 'attendanceRecord/list/1', [
            {'id': 5, 'student_id': 2, 'attended': False},
            {'id': 6, 'student_id': 3, 'attended': True},
        ])

    def test_records_of_one_list(self):
        response = self.client.get(self.url)
        self.assertEqual(len(self.calls_to('GET', 'attendanceRecord/list/1')), 1)
        self.assertContains(response, reverse('academics:attendance_record_edit', args=[1, 6]))

    def test_records_are_not_sortable(self):
        self.client.get(self.url, {'sort': 'student_id'})
        self.assertEqual(self.calls_to('GET', 'attendanceRecord/sort'), [])

    def test_state_is_kept_per_list(self):
        self.client.get(self.url)
        self.route('GET', 'attendanceRecord/list/2', [])
        response = self.client.get(reverse('academics:attendance_record_list', args=[2]), {'delete': '5'})
        self.assertNotContains(response, "Are you sure")

    def test_delete_record(self):
        self.client.get(self.url)
        self.client.get(self.url, {'delete': '5'})
        self.client.post(reverse('academics:attendance_record_delete_confirm', args=[1]))
        self.assertEqual(len(self.calls_to('DELETE', 'attendanceRecord/5')), 1)
        self.assertEqual(len(self.calls_to('GET', 'attendanceRecord/list/1')), 2)

    def test_mark_attended(self):
        self.route('GET', 'attendanceRecord/5', {'id': 5, 'attended': False})
        response = self.client.post(reverse('academics:attendance_record_edit', args=[1, 5]), {'attended': 'on'})
        self.assertRedirects(response, self.url, fetch_redirect_response=False)
        self.assertEqual(self.calls_to('PUT', 'attendanceRecord/record/5')[0][3], {'attended': True})


class VocabViewTests(ApiViewTestCase):

    def test_vocab_list_create(self):
        response = self.client.post(
            reverse('academics:vocab_list_create'),
            {'title': 'Fruit', 'description': 'Things that grow', 'category': 'Food'},
        )
        self.assertRedirects(response, reverse('academics:vocab_list_list'), fetch_redirect_response=False)
        self.assertEqual(
            self.calls_to('POST', 'vocabList')[0][3],
            {'title': 'Fruit', 'description': 'Things that grow', 'category': 'Food'},
        )

    def test_vocab_list_load_failure(self):
        self.route('GET', 'vocabList/all', TransportError("Bad gateway", status_code=502))
        response = self.client.get(reverse('academics:vocab_list_list'))
        self.assertContains(response, "Failed to load records: Bad gateway")

    def test_words_are_scoped_to_list(self):
        self.route('GET', 'vocab/list/3', VOCAB_WORDS)
        response = self.client.get(reverse('academics:vocab_word_list', args=[3]))
        self.assertContains(response, 'manzana')
        self.route('GET', 'vocab/list/3/search', VOCAB_WORDS)
        response = self.client.get(reverse('academics:vocab_word_list', args=[3]), {'q': 'corr'})
        self.assertEqual(self.calls_to('GET', 'vocab/list/3/search')[0][2], {'query': 'corr'})
        self.assertNotContains(response, 'manzana')

    def test_word_delete_uses_word_endpoint(self):
        self.route('GET', 'vocab/list/3', VOCAB_WORDS)
        url = reverse('academics:vocab_word_list', args=[3])
        self.client.get(url)
        self.client.get(url, {'delete': '11'})
        self.client.post(reverse('academics:vocab_word_delete_confirm', args=[3]))
        self.assertEqual(len(self.calls_to('DELETE', 'vocab/11')), 1)

    def test_word_create_posts_to_list(self):
        response = self.client.post(
            reverse('academics:vocab_word_create', args=[3]),
            {'word': 'pear', 'part_of_speech': 'noun'},
        )
        self.assertRedirects(response, reverse('academics:vocab_word_list', args=[3]), fetch_redirect_response=False)
        payload = self.calls_to('POST', 'vocab/list/3')[0][3]
        self.assertEqual(payload['word'], 'pear')

    def test_word_edit_load_failure(self):
        self.route('GET', 'vocab/12', TransportError("not found", status_code=404))
        response = self.client.get(reverse('academics:vocab_word_edit', args=[3, 12]))
        self.assertRedirects(response, reverse('academics:vocab_word_list', args=[3]), fetch_redirect_response=False)
