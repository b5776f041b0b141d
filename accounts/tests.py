from unittest import mock

from django.test import TestCase, override_settings
from django.urls import reverse

from accounts.forms import LoginForm, UserCreateForm, UserEditForm
from core.api import (
    API_TOKEN_SESSION_KEY,
    API_USER_SESSION_KEY,
    REDIRECT_AFTER_LOGIN_SESSION_KEY,
    TransportError,
    UnauthorizedError,
)
from core.screens import LIST_PARTIAL_TEMPLATE
from core.tests import ApiViewTestCase

ROLES = [{'id': 1, 'name': 'admin'}, {'id': 2, 'name': 'teacher'}]

USERS = [
    {'id': 1, 'username': 'alice', 'role_name': 'admin'},
    {'id': 2, 'username': 'bob', 'role_name': 'teacher'},
    {'id': 3, 'username': 'carol', 'role_name': 'student'},
]


@override_settings(API_ADMIN_ROLE_ID=1)
class LoginFormTests(TestCase):

    def setUp(self):
        self.api = mock.Mock()

    def test_admin_login(self):
        self.api.post.return_value = {'token': 't0k', 'user': {'id': 1, 'role_id': 1}}
        form = LoginForm(self.api, data={'username': 'alice', 'password': 'secret'})
        self.assertTrue(form.is_valid())
        self.assertEqual(form.get_payload()['token'], 't0k')
        self.api.post.assert_called_once_with('auth/login', {'username': 'alice', 'password': 'secret'})

    def test_non_admin_rejected(self):
        self.api.post.return_value = {'token': 't0k', 'user': {'id': 2, 'role_id': 2}}
        form = LoginForm(self.api, data={'username': 'bob', 'password': 'secret'})
        self.assertFalse(form.is_valid())
        self.assertIn("You must be an admin to access this page.", form.non_field_errors())

    def test_missing_token_rejected(self):
        self.api.post.return_value = {'user': {'id': 1, 'role_id': 1}}
        form = LoginForm(self.api, data={'username': 'alice', 'password': 'secret'})
        self.assertFalse(form.is_valid())

    def test_api_error_message_shown(self):
        self.api.post.side_effect = UnauthorizedError("Invalid credentials", status_code=401)
        form = LoginForm(self.api, data={'username': 'alice', 'password': 'wrong'})
        self.assertFalse(form.is_valid())
        self.assertIn("Invalid credentials", form.non_field_errors())

    def test_blank_fields_do_not_call_api(self):
        form = LoginForm(self.api, data={'username': '', 'password': ''})
        self.assertFalse(form.is_valid())
        self.api.post.assert_not_called()


class UserFormTests(TestCase):

    def test_short_password(self):
        form = UserCreateForm({'username': 'dan', 'password': '123', 'role_id': '2'}, roles=ROLES)
        self.assertFalse(form.is_valid())
        self.assertEqual(form.errors['password'], ["Password must be at least 6 characters"])

    def test_blank_username(self):
        form = UserCreateForm({'username': '   ', 'password': 'secret1', 'role_id': '2'}, roles=ROLES)
        self.assertFalse(form.is_valid())
        self.assertIn('username', form.errors)

    def test_to_api(self):
        form = UserCreateForm({'username': 'dan', 'password': 'secret1', 'role_id': '2'}, roles=ROLES)
        self.assertTrue(form.is_valid())
        self.assertEqual(form.to_api(), {'username': 'dan', 'password': 'secret1', 'role_id': 2})

    def test_role_must_be_known(self):
        form = UserEditForm({'username': 'dan', 'role_id': '9'}, roles=ROLES)
        self.assertFalse(form.is_valid())


@override_settings(API_ADMIN_ROLE_ID=1)
class LoginViewTests(ApiViewTestCase):

    def login(self):
        """Start logged out."""

    def test_get_renders_form(self):
        response = self.client.get(reverse('accounts:login'))
        self.assertEqual(response.status_code, 200)
        self.assertTemplateUsed(response, 'accounts/login.html')

    def test_successful_login_stores_token(self):
        self.route('POST', 'auth/login', {'token': 'fresh', 'user': {'id': 1, 'username': 'alice', 'role_id': 1}})
        response = self.client.post(reverse('accounts:login'), {'username': 'alice', 'password': 'secret'})
        self.assertRedirects(response, reverse('core:index'), fetch_redirect_response=False)
        self.assertEqual(self.client.session[API_TOKEN_SESSION_KEY], 'fresh')
        self.assertEqual(self.client.session[API_USER_SESSION_KEY]['username'], 'alice')

    def test_returns_to_requested_page(self):
        self.client.get(reverse('teachers:teacher_list'))
        self.assertEqual(self.client.session[REDIRECT_AFTER_LOGIN_SESSION_KEY], reverse('teachers:teacher_list'))
        self.route('POST', 'auth/login', {'token': 'fresh', 'user': {'id': 1, 'role_id': 1}})
        response = self.client.post(reverse('accounts:login'), {'username': 'alice', 'password': 'secret'})
        self.assertRedirects(response, reverse('teachers:teacher_list'), fetch_redirect_response=False)

    def test_failed_login_shows_error(self):
        self.route('POST', 'auth/login', TransportError("Invalid credentials", status_code=401))
        response = self.client.post(reverse('accounts:login'), {'username': 'alice', 'password': 'nope'})
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Invalid credentials")
        self.assertNotIn(API_TOKEN_SESSION_KEY, self.client.session)


class LogoutViewTests(ApiViewTestCase):

    def test_logout_flushes_session(self):
        response = self.client.post(reverse('accounts:logout'))
        self.assertRedirects(response, reverse('accounts:login'), fetch_redirect_response=False)
        self.assertEqual(len(self.calls_to('POST', 'auth/logout')), 1)
        self.assertNotIn(API_TOKEN_SESSION_KEY, self.client.session)

    def test_logout_survives_api_failure(self):
        self.route('POST', 'auth/logout', TransportError("down"))
        response = self.client.post(reverse('accounts:logout'))
        self.assertEqual(response.status_code, 302)
        self.assertNotIn(API_TOKEN_SESSION_KEY, self.client.session)

    def test_get_not_allowed(self):
        self.assertEqual(self.client.get(reverse('accounts:logout')).status_code, 405)


class UserListViewTests(ApiViewTestCase):
    """The user list exercises the shared list screen end to end."""

    def setUp(self):
        super().setUp()
        self.url = reverse('accounts:user_list')
        self.route('GET', 'user/all', USERS)

    def test_requires_login(self):
        self.client.post(reverse('accounts:logout'))
        response = self.client.get(self.url)
        self.assertRedirects(response, reverse('accounts:login'), fetch_redirect_response=False)

    def test_mount_loads_everything(self):
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'alice')
        self.assertContains(response, 'carol')
        self.assertEqual(len(self.calls_to('GET', 'user/all')), 1)

    def test_htmx_gets_table_only(self):
        response = self.client.get(self.url, HTTP_HX_REQUEST='true')
        self.assertTemplateUsed(response, LIST_PARTIAL_TEMPLATE)
        self.assertTemplateNotUsed(response, 'base.html')

    def test_sort_toggles_between_requests(self):
        self.client.get(self.url)
        self.client.get(self.url, {'sort': 'username'})
        self.client.get(self.url, {'sort': 'username'})
        orders = [call[2]['order'] for call in self.calls_to('GET', 'user/sort')]
        self.assertEqual(orders, ['ASC', 'DESC'])
        self.assertEqual(self.calls_to('GET', 'user/sort')[0][2]['column'], 'username')

    def test_unknown_sort_column_reloads(self):
        self.client.get(self.url, {'sort': 'password'})
        self.assertEqual(self.calls_to('GET', 'user/sort'), [])
        self.assertEqual(len(self.calls_to('GET', 'user/all')), 1)

    def test_search_filters_server_results(self):
        self.route('GET', 'user/search', USERS)
        response = self.client.get(self.url, {'q': 'bo'})
        self.assertEqual(self.calls_to('GET', 'user/search')[0][2], {'query': 'bo'})
        self.assertContains(response, 'bob')
        self.assertNotContains(response, 'carol')

    def test_load_failure_shown_inline(self):
        self.route('GET', 'user/all', TransportError("Service unavailable"))
        response = self.client.get(self.url)
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Failed to load records: Service unavailable")

    def test_failed_reload_keeps_stale_rows(self):
        self.client.get(self.url)
        self.route('GET', 'user/sort', TransportError("timeout"))
        response = self.client.get(self.url, {'sort': 'id'})
        self.assertContains(response, 'alice')
        self.assertContains(response, "Failed to sort by id: timeout")

    def test_delete_asks_for_confirmation(self):
        self.client.get(self.url)
        response = self.client.get(self.url, {'delete': '2'})
        self.assertContains(response, "Are you sure you want to delete record 2?")
        self.assertEqual(self.calls_to('DELETE', 'user/2'), [])

    def test_delete_unknown_row_is_ignored(self):
        self.client.get(self.url)
        response = self.client.get(self.url, {'delete': '42'})
        self.assertNotContains(response, "Are you sure")

    def test_confirm_deletes_and_reloads(self):
        self.client.get(self.url)
        self.client.get(self.url, {'delete': '2'})
        self.route('GET', 'user/all', [USERS[0], USERS[2]])
        response = self.client.post(reverse('accounts:user_delete_confirm'))
        self.assertEqual(len(self.calls_to('DELETE', 'user/2')), 1)
        self.assertEqual(len(self.calls_to('GET', 'user/all')), 2)
        self.assertNotContains(response, 'bob')
        self.assertNotContains(response, "Are you sure")

    def test_confirm_failure_closes_dialog(self):
        self.client.get(self.url)
        self.client.get(self.url, {'delete': '2'})
        self.route('DELETE', 'user/2', TransportError("User has records"))
        response = self.client.post(reverse('accounts:user_delete_confirm'))
        self.assertContains(response, "Failed to delete record 2: User has records")
        self.assertNotContains(response, "Are you sure")
        self.assertContains(response, 'bob')

    def test_htmx_confirm_notice_stays_on_the_list(self):
        self.client.get(self.url)
        self.client.get(self.url, {'delete': '2'})
        response = self.client.post(reverse('accounts:user_delete_confirm'), HTTP_HX_REQUEST='true')
        self.assertTemplateUsed(response, LIST_PARTIAL_TEMPLATE)
        self.assertContains(response, "Record 2 deleted.")
        dashboard = self.client.get(reverse('core:index'))
        self.assertNotContains(dashboard, "Record 2 deleted.")

    def test_confirm_failure_reported_once(self):
        self.client.get(self.url)
        self.client.get(self.url, {'delete': '2'})
        self.route('DELETE', 'user/2', TransportError("User has records"))
        response = self.client.post(reverse('accounts:user_delete_confirm'))
        self.assertContains(response, "Failed to delete record 2: User has records", count=1)
        dashboard = self.client.get(reverse('core:index'))
        self.assertNotContains(dashboard, "Failed to delete record 2")

    def test_search_term_sent_unchanged(self):
        self.route('GET', 'user/search', USERS)
        self.client.get(self.url, {'q': ' bo'})
        self.assertEqual(self.calls_to('GET', 'user/search')[0][2], {'query': ' bo'})

    def test_htmx_request_after_logout_redirects_whole_page(self):
        self.client.post(reverse('accounts:logout'))
        response = self.client.get(self.url, HTTP_HX_REQUEST='true')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response['HX-Redirect'], reverse('accounts:login'))
        self.assertEqual(self.client.session[REDIRECT_AFTER_LOGIN_SESSION_KEY], self.url)

    def test_confirm_without_pending_does_nothing(self):
        self.client.get(self.url)
        self.client.post(reverse('accounts:user_delete_confirm'))
        self.assertEqual([call for call in self.calls if call[0] == 'DELETE'], [])

    def test_cancel_keeps_row(self):
        self.client.get(self.url)
        self.client.get(self.url, {'delete': '2'})
        response = self.client.post(reverse('accounts:user_delete_cancel'))
        self.assertNotContains(response, "Are you sure")
        self.assertContains(response, 'bob')
        self.assertEqual(self.calls_to('DELETE', 'user/2'), [])

    def test_confirm_requires_post(self):
        self.assertEqual(self.client.get(reverse('accounts:user_delete_confirm')).status_code, 405)


class UserFormViewTests(ApiViewTestCase):

    def setUp(self):
        super().setUp()
        self.route('GET', 'role/all', ROLES)

    def test_create_posts_payload(self):
        response = self.client.post(
            reverse('accounts:user_create'),
            {'username': 'dan', 'password': 'secret1', 'role_id': '2'},
        )
        self.assertRedirects(response, reverse('accounts:user_list'), fetch_redirect_response=False)
        self.assertEqual(
            self.calls_to('POST', 'user')[0][3],
            {'username': 'dan', 'password': 'secret1', 'role_id': 2},
        )

    def test_create_shows_server_message(self):
        self.route('POST', 'user', TransportError("Username already exists", status_code=409))
        response = self.client.post(
            reverse('accounts:user_create'),
            {'username': 'dan', 'password': 'secret1', 'role_id': '2'},
        )
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Error: Username already exists")

    def test_edit_changes_role_through_role_endpoint(self):
        self.route('GET', 'user/2', {'id': 2, 'username': 'bob', 'role_id': 2})
        response = self.client.post(reverse('accounts:user_edit', args=[2]), {'username': 'bobby', 'role_id': '1'})
        self.assertRedirects(response, reverse('accounts:user_list'), fetch_redirect_response=False)
        self.assertEqual(self.calls_to('PUT', 'user/2')[0][3], {'username': 'bobby'})
        self.assertEqual(self.calls_to('PUT', 'user/2/role')[0][3], {'role_id': 1})

    def test_edit_prefills_name_and_role(self):
        self.route('GET', 'user/2', {'id': 2, 'username': 'bob', 'role_id': 2})
        response = self.client.get(reverse('accounts:user_edit', args=[2]))
        self.assertContains(response, 'Edit User bob')
        self.assertEqual(response.context['form'].initial, {'username': 'bob', 'role_id': '2'})

    def test_edit_role_failure_stays_on_form(self):
        self.route('GET', 'user/2', {'id': 2, 'username': 'bob', 'role_id': 2})
        self.route('PUT', 'user/2/role', TransportError("Role is locked", status_code=409))
        response = self.client.post(reverse('accounts:user_edit', args=[2]), {'username': 'bob', 'role_id': '1'})
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, "Error: Role is locked")

    def test_edit_same_role_skips_role_endpoint(self):
        self.route('GET', 'user/2', {'id': 2, 'username': 'bob', 'role_id': 2})
        self.client.post(reverse('accounts:user_edit', args=[2]), {'username': 'bob', 'role_id': '2'})
        self.assertEqual(self.calls_to('PUT', 'user/2/role'), [])

    def test_edit_load_failure_returns_to_list(self):
        self.route('GET', 'user/5', TransportError("not found", status_code=404))
        response = self.client.get(reverse('accounts:user_edit', args=[5]))
        self.assertRedirects(response, reverse('accounts:user_list'), fetch_redirect_response=False)
