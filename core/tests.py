from pathlib import Path
from unittest import mock

import requests
from django.template.loader import get_template
from django.test import Client, SimpleTestCase, TestCase
from django.urls import reverse

import core
from core.api import (
    API_TOKEN_SESSION_KEY,
    API_USER_SESSION_KEY,
    REDIRECT_AFTER_LOGIN_SESSION_KEY,
    ApiClient,
    RemoteCollection,
    TransportError,
    UnauthorizedError,
    get_collection,
)
from core.collection import (
    RemoteCollectionController,
    SortDirection,
    SortState,
    Status,
    filter_records,
    record_matches,
)
from core.screens import sort_indicator
from core.templatetags.core_tags import api_date, status_badge


class FakeSource:
    """In-memory data source recording the calls made by the controller."""

    def __init__(self, items=None):
        self.items = list(items or [])
        self.calls = []
        self.error = None
        self.search_result = None
        self.on_fetch = None

    def _respond(self, result):
        if self.on_fetch:
            hook, self.on_fetch = self.on_fetch, None
            hook()
        if self.error:
            raise self.error
        return list(result)

    def fetch_all(self):
        self.calls.append(('all',))
        return self._respond(self.items)

    def fetch_sorted(self, column, direction):
        self.calls.append(('sort', column, direction))
        reverse_order = direction is SortDirection.DESCENDING
        return self._respond(sorted(self.items, key=lambda r: r.get(column), reverse=reverse_order))

    def fetch_search(self, query):
        self.calls.append(('search', query))
        return self._respond(self.items if self.search_result is None else self.search_result)

    def remove(self, record_id):
        self.calls.append(('remove', record_id))
        if self.error:
            raise self.error
        self.items = [r for r in self.items if r['id'] != record_id]


ROWS = [
    {'id': 1, 'title': 'Morning', 'status': 'active'},
    {'id': 2, 'title': 'Evening', 'status': 'closed'},
    {'id': 3, 'title': 'Weekend', 'status': 'active'},
]


class RecordMatchTests(SimpleTestCase):

    def test_empty_query_matches_everything(self):
        self.assertTrue(record_matches({'id': 1}, ''))

    def test_case_insensitive(self):
        self.assertTrue(record_matches({'title': 'Morning'}, 'MORN'))

    def test_numbers_match_as_text(self):
        self.assertTrue(record_matches({'id': 42}, '42'))

    def test_nested_values_and_none_are_ignored(self):
        record = {'tags': ['abc'], 'meta': {'x': 'abc'}, 'note': None}
        self.assertFalse(record_matches(record, 'abc'))
        self.assertFalse(record_matches(record, 'none'))

    def test_filter_preserves_order(self):
        self.assertEqual([r['id'] for r in filter_records(ROWS, 'ing')], [1, 2])


class ControllerLoadTests(SimpleTestCase):

    def setUp(self):
        self.source = FakeSource(ROWS)
        self.controller = RemoteCollectionController(self.source, name='test')

    def test_initial_state(self):
        self.assertEqual(self.controller.items, [])
        self.assertEqual(self.controller.status, Status.IDLE)
        self.assertIsNone(self.controller.sort)
        self.assertEqual(self.controller.search_query, '')
        self.assertIsNone(self.controller.pending_delete_id)

    def test_load_replaces_items(self):
        self.controller.load()
        self.assertEqual(self.controller.items, ROWS)
        self.assertEqual(self.controller.status, Status.READY)
        self.assertIsNone(self.controller.error_message)

    def test_load_resets_sort_and_search(self):
        self.controller.sort = SortState('title', SortDirection.DESCENDING)
        self.controller.search_query = 'x'
        self.controller.load()
        self.assertIsNone(self.controller.sort)
        self.assertEqual(self.controller.search_query, '')

    def test_failed_load_keeps_previous_items(self):
        self.controller.load()
        self.source.error = TransportError("connection refused")
        self.controller.load()
        self.assertEqual(self.controller.items, ROWS)
        self.assertTrue(self.controller.has_failed)
        self.assertEqual(self.controller.error_message, "Failed to load records: connection refused")

    def test_successful_load_clears_error(self):
        self.source.error = TransportError("down")
        self.controller.load()
        self.source.error = None
        self.controller.load()
        self.assertEqual(self.controller.status, Status.READY)
        self.assertIsNone(self.controller.error_message)


class ControllerSortTests(SimpleTestCase):

    def setUp(self):
        self.source = FakeSource(ROWS)
        self.controller = RemoteCollectionController(self.source)
        self.controller.load()

    def test_first_click_sorts_ascending(self):
        self.controller.sort_by('title')
        self.assertEqual(self.controller.sort, SortState('title', SortDirection.ASCENDING))
        self.assertEqual(self.source.calls[-1], ('sort', 'title', SortDirection.ASCENDING))
        self.assertEqual([r['title'] for r in self.controller.items], ['Evening', 'Morning', 'Weekend'])

    def test_same_column_toggles(self):
        self.controller.sort_by('title')
        self.controller.sort_by('title')
        self.assertEqual(self.controller.sort.direction, SortDirection.DESCENDING)
        self.controller.sort_by('title')
        self.assertEqual(self.controller.sort.direction, SortDirection.ASCENDING)

    def test_new_column_starts_ascending(self):
        self.controller.sort_by('title')
        self.controller.sort_by('title')
        self.controller.sort_by('id')
        self.assertEqual(self.controller.sort, SortState('id', SortDirection.ASCENDING))

    def test_failed_sort_keeps_new_sort_state(self):
        self.source.error = TransportError("timeout")
        self.controller.sort_by('title')
        self.assertEqual(self.controller.sort, SortState('title', SortDirection.ASCENDING))
        self.assertEqual(self.controller.items, ROWS)
        self.assertEqual(self.controller.error_message, "Failed to sort by title: timeout")

    def test_sort_keeps_search_term_without_sending_it(self):
        self.controller.search('ing')
        self.controller.sort_by('id')
        self.assertEqual(self.controller.search_query, 'ing')
        self.assertEqual(self.source.calls[-1], ('sort', 'id', SortDirection.ASCENDING))


class ControllerSearchTests(SimpleTestCase):

    def setUp(self):
        self.source = FakeSource(ROWS)
        self.controller = RemoteCollectionController(self.source)

    def test_results_are_filtered_locally(self):
        # Server ignores the term and returns everything
        self.controller.search('week')
        self.assertEqual(self.controller.search_query, 'week')
        self.assertEqual([r['id'] for r in self.controller.items], [3])

    def test_empty_search_keeps_server_response(self):
        self.controller.search('')
        self.assertEqual(self.source.calls[-1], ('search', ''))
        self.assertEqual(self.controller.items, ROWS)

    def test_search_does_not_reset_sort(self):
        self.controller.sort_by('title')
        self.controller.search('morning')
        self.assertEqual(self.controller.sort.column, 'title')

    def test_failed_search_keeps_query_and_items(self):
        self.controller.load()
        self.source.error = TransportError("bad gateway")
        self.controller.search('morning')
        self.assertEqual(self.controller.search_query, 'morning')
        self.assertEqual(self.controller.items, ROWS)
        self.assertEqual(self.controller.error_message, "Failed to search records: bad gateway")


class ControllerDeleteTests(SimpleTestCase):

    def setUp(self):
        self.source = FakeSource(ROWS)
        self.controller = RemoteCollectionController(self.source)
        self.controller.load()

    def test_request_delete_sets_pending(self):
        self.controller.request_delete(2)
        self.assertEqual(self.controller.pending_delete_id, 2)
        self.assertNotIn(('remove', 2), self.source.calls)

    def test_request_delete_accepts_text_ids(self):
        self.controller.request_delete('2')
        self.assertEqual(self.controller.pending_delete_id, 2)

    def test_request_delete_ignores_unknown_id(self):
        self.controller.request_delete(99)
        self.assertIsNone(self.controller.pending_delete_id)

    def test_cancel_clears_pending(self):
        self.controller.request_delete(2)
        self.controller.cancel_delete()
        self.assertIsNone(self.controller.pending_delete_id)

    def test_confirm_without_pending_is_noop(self):
        self.controller.sort_by('title')
        self.controller.search('eve')
        before = self.controller.snapshot()
        items = list(self.controller.items)
        calls = len(self.source.calls)

        self.controller.confirm_delete()

        self.assertEqual(len(self.source.calls), calls)
        self.assertEqual(self.controller.snapshot(), before)
        self.assertEqual(self.controller.items, items)
        self.assertEqual(self.controller.status, Status.READY)
        self.assertIsNone(self.controller.error_message)
        self.assertIsNone(self.controller.pending_delete_id)

    def test_confirm_removes_and_reloads(self):
        self.controller.request_delete(2)
        self.controller.confirm_delete()
        self.assertEqual(self.source.calls[-2:], [('remove', 2), ('all',)])
        self.assertEqual([r['id'] for r in self.controller.items], [1, 3])
        self.assertIsNone(self.controller.pending_delete_id)

    def test_failed_confirm_closes_dialog(self):
        self.controller.request_delete(2)
        self.source.error = TransportError("Record is referenced")
        self.controller.confirm_delete()
        self.assertIsNone(self.controller.pending_delete_id)
        self.assertEqual(self.controller.items, ROWS)
        self.assertEqual(
            self.controller.error_message,
            "Failed to delete record 2: Record is referenced",
        )


class ControllerOrderingTests(SimpleTestCase):
    """Only the response to the newest request may change the state."""

    def test_response_overtaken_by_newer_request_is_dropped(self):
        source = FakeSource(ROWS)
        controller = RemoteCollectionController(source)
        source.search_result = [ROWS[0]]
        # While the load is in flight the admin searches.
        source.on_fetch = lambda: controller.search('morning')
        controller.load()
        self.assertEqual(controller.items, [ROWS[0]])
        self.assertEqual(controller.search_query, 'morning')

    def test_stale_failure_is_ignored(self):
        source = FakeSource(ROWS)
        controller = RemoteCollectionController(source)

        def load_overtaken_then_failing():
            controller.search('')
            raise TransportError("late failure")

        source.fetch_all = load_overtaken_then_failing
        controller.load()
        self.assertEqual(controller.status, Status.READY)
        self.assertIsNone(controller.error_message)
        self.assertEqual(controller.items, ROWS)


class ControllerSnapshotTests(SimpleTestCase):

    def test_restore_round_trip(self):
        controller = RemoteCollectionController(FakeSource(ROWS))
        controller.load()
        controller.sort_by('title')
        controller.sort_by('title')
        controller.search_query = 'eve'
        controller.request_delete(2)

        restored = RemoteCollectionController(FakeSource(ROWS))
        restored.restore(controller.snapshot())
        self.assertEqual(restored.sort, SortState('title', SortDirection.DESCENDING))
        self.assertEqual(restored.search_query, 'eve')
        self.assertEqual(restored.pending_delete_id, 2)

    def test_restore_ignores_garbage(self):
        controller = RemoteCollectionController(FakeSource())
        controller.restore({'sort': ['title', 'SIDEWAYS']})
        self.assertIsNone(controller.sort)
        controller.restore(None)
        self.assertEqual(controller.search_query, '')


def make_response(status_code=200, body=None, content=None):
    response = mock.Mock()
    response.status_code = status_code
    if content is None:
        content = b'' if body is None else b'{}'
    response.content = content
    response.json.return_value = body
    return response


class ApiClientTests(SimpleTestCase):

    def setUp(self):
        self.session = mock.Mock()
        self.client_api = ApiClient('http://api.test/', token='abc', session=self.session)

    def test_sends_bearer_token(self):
        self.session.request.return_value = make_response(body=[])
        self.client_api.get('user/all')
        args, kwargs = self.session.request.call_args
        self.assertEqual(args, ('GET', 'http://api.test/user/all'))
        self.assertEqual(kwargs['headers']['Authorization'], 'Bearer abc')
        self.assertEqual(kwargs['timeout'], 30)

    def test_no_token_no_header(self):
        api = ApiClient('http://api.test', session=self.session)
        self.session.request.return_value = make_response(body=[])
        api.get('role/all')
        self.assertNotIn('Authorization', self.session.request.call_args[1]['headers'])

    def test_empty_body_returns_none(self):
        self.session.request.return_value = make_response(status_code=204)
        self.assertIsNone(self.client_api.delete('user/1'))

    def test_error_status_uses_server_message(self):
        self.session.request.return_value = make_response(400, body={'message': 'Username taken'})
        with self.assertRaises(TransportError) as ctx:
            self.client_api.post('user', {'username': 'x'})
        self.assertEqual(str(ctx.exception), 'Username taken')
        self.assertEqual(ctx.exception.status_code, 400)

    def test_error_status_without_message(self):
        self.session.request.return_value = make_response(500, content=b'oops')
        self.session.request.return_value.json.side_effect = ValueError
        with self.assertRaises(TransportError) as ctx:
            self.client_api.get('user/all')
        self.assertEqual(str(ctx.exception), 'GET user/all failed with status 500')

    def test_undecodable_success_body(self):
        self.session.request.return_value = make_response(200, content=b'<html>')
        self.session.request.return_value.json.side_effect = ValueError
        with self.assertRaises(TransportError):
            self.client_api.get('user/all')

    def test_network_errors_become_transport_errors(self):
        self.session.request.side_effect = requests.exceptions.ConnectionError("refused")
        with self.assertRaises(TransportError):
            self.client_api.get('user/all')
        self.session.request.side_effect = requests.exceptions.Timeout()
        with self.assertRaisesMessage(TransportError, 'Connection timeout'):
            self.client_api.get('user/all')

    def test_unauthorized_calls_hook(self):
        hook = mock.Mock()
        api = ApiClient('http://api.test', token='old', on_unauthorized=hook, session=self.session)
        self.session.request.return_value = make_response(401, body={'message': 'Token expired'})
        with self.assertRaises(UnauthorizedError):
            api.get('user/all')
        hook.assert_called_once_with()


class RemoteCollectionTests(SimpleTestCase):

    def setUp(self):
        self.api = mock.Mock()

    def test_default_paths(self):
        users = get_collection(self.api, 'user')
        self.api.get.return_value = []
        users.fetch_all()
        self.api.get.assert_called_with('user/all')
        users.fetch_sorted('username', SortDirection.DESCENDING)
        self.api.get.assert_called_with('user/sort', params={'column': 'username', 'order': 'DESC'})
        users.fetch_search('bob')
        self.api.get.assert_called_with('user/search', params={'query': 'bob'})
        users.remove(7)
        self.api.delete.assert_called_with('user/7')

    def test_students_search_with_q(self):
        self.api.get.return_value = []
        get_collection(self.api, 'student').fetch_search('amy')
        self.api.get.assert_called_with('student/search', params={'q': 'amy'})

    def test_scoped_collection(self):
        words = get_collection(self.api, 'vocab', list_path='vocab/list/4', all_path='vocab/list/4')
        self.api.get.return_value = []
        words.fetch_all()
        self.api.get.assert_called_with('vocab/list/4')
        words.fetch_search('run')
        self.api.get.assert_called_with('vocab/list/4/search', params={'query': 'run'})
        words.remove(9)
        self.api.delete.assert_called_with('vocab/9')

    def test_non_list_body_is_an_error(self):
        self.api.get.return_value = {'message': 'ok'}
        with self.assertRaises(TransportError):
            RemoteCollection(self.api, 'user').fetch_all()

    def test_unknown_entity(self):
        with self.assertRaises(ValueError):
            get_collection(self.api, 'spaceship')


class TemplateHelperTests(SimpleTestCase):

    def test_sort_indicator(self):
        sort = SortState('title', SortDirection.ASCENDING)
        self.assertEqual(sort_indicator(None, 'title'), '↕')
        self.assertEqual(sort_indicator(sort, 'id'), '↕')
        self.assertEqual(sort_indicator(sort, 'title'), '↑')
        self.assertEqual(sort_indicator(SortState('title', SortDirection.DESCENDING), 'title'), '↓')

    def test_status_badge(self):
        self.assertEqual(status_badge('Active'), 'badge-success')
        self.assertEqual(status_badge('weird'), 'badge-neutral')
        self.assertEqual(status_badge(None), 'badge-neutral')

    def test_api_date(self):
        self.assertEqual(str(api_date('2024-05-01T10:00:00.000Z')), '2024-05-01')
        self.assertEqual(api_date('not a date'), 'not a date')
        self.assertEqual(api_date(5), 5)


class TemplateLocationTests(SimpleTestCase):

    def test_templates_live_in_the_core_package(self):
        templates_dir = Path(core.__file__).resolve().parent / 'templates'
        for name in ('base.html', 'core/collection/list.html', 'accounts/login.html'):
            origin = Path(get_template(name).origin.name).resolve()
            self.assertTrue(origin.is_relative_to(templates_dir), origin)


class ApiViewTestCase(TestCase):
    """
    Logged-in test client whose API calls are answered from ``self.routes``.

    Routes map ``(method, path)`` to a response body or an exception to
    raise; unrouted calls answer with an empty body.
    """

    def setUp(self):
        self.routes = {}
        self.calls = []
        patcher = mock.patch('core.api.client.ApiClient.request', side_effect=self._fake_request)
        patcher.start()
        self.addCleanup(patcher.stop)
        self.login()

    def login(self):
        session = self.client.session
        session[API_TOKEN_SESSION_KEY] = 'test-token'
        session[API_USER_SESSION_KEY] = {'id': 1, 'username': 'admin', 'role_id': 1}
        session.save()

    def route(self, method, path, response):
        self.routes[(method, path)] = response

    def _fake_request(self, method, path, params=None, json=None):
        self.calls.append((method, path, params, json))
        response = self.routes.get((method, path))
        if isinstance(response, Exception):
            raise response
        return response

    def calls_to(self, method, path):
        return [call for call in self.calls if call[:2] == (method, path)]


class DashboardViewTests(ApiViewTestCase):

    def test_requires_login(self):
        response = Client().get(reverse('core:index'))
        self.assertRedirects(response, reverse('accounts:login'), fetch_redirect_response=False)

    def test_shows_counts(self):
        self.route('GET', 'student/all', [{'id': 1}, {'id': 2}])
        response = self.client.get(reverse('core:index'))
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'Students')
        self.assertTemplateUsed(response, 'core/index.html')

    def test_failed_count_is_reported(self):
        self.route('GET', 'teacher/all', TransportError("down"))
        response = self.client.get(reverse('core:index'))
        self.assertContains(response, "Some figures could not be loaded.")

    def test_htmx_gets_partial(self):
        response = self.client.get(reverse('core:index'), HTTP_HX_REQUEST='true')
        self.assertTemplateUsed(response, 'core/partials/index_content.html')
        self.assertTemplateNotUsed(response, 'base.html')


@mock.patch('core.api.client.requests.Session.request')
class ExpiredSessionTests(TestCase):

    def setUp(self):
        session = self.client.session
        session[API_TOKEN_SESSION_KEY] = 'stale'
        session[API_USER_SESSION_KEY] = {'id': 1, 'username': 'admin', 'role_id': 1}
        session.save()

    def test_401_sends_browser_to_login(self, session_request):
        session_request.return_value = make_response(401, body={'message': 'Token expired'})
        response = self.client.get(reverse('accounts:user_list'))
        self.assertRedirects(response, reverse('accounts:login'), fetch_redirect_response=False)
        session = self.client.session
        self.assertNotIn(API_TOKEN_SESSION_KEY, session)
        self.assertEqual(session[REDIRECT_AFTER_LOGIN_SESSION_KEY], reverse('accounts:user_list'))

    def test_401_on_htmx_request(self, session_request):
        session_request.return_value = make_response(401, body={'message': 'Token expired'})
        response = self.client.get(reverse('accounts:user_list'), HTTP_HX_REQUEST='true')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response['HX-Redirect'], reverse('accounts:login'))


class HealthCheckTests(TestCase):

    def test_liveness(self):
        response = self.client.get('/health/')
        self.assertEqual(response.json(), {'status': 'healthy'})

    @mock.patch('core.middleware.requests.head', side_effect=requests.exceptions.ConnectionError("refused"))
    def test_readiness_reports_unreachable_api(self, head):
        response = self.client.get('/health/ready/')
        self.assertEqual(response.status_code, 503)
        self.assertEqual(response.json()['checks']['api']['status'], 'unhealthy')
        self.assertEqual(response.json()['checks']['database']['status'], 'healthy')
