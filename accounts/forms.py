from django import forms
from django.conf import settings

from core.api import TransportError, login as api_login


class LoginForm(forms.Form):
    """
    Login against the classroom API.

    Only admin accounts may use the dashboard. On success the API payload
    (``{token, user}``) is available from ``get_payload()``.
    """

    username = forms.CharField(
        label="Username",
        widget=forms.TextInput(attrs={
            'autofocus': True,
            'autocomplete': 'username',
        })
    )
    password = forms.CharField(
        label="Password",
        strip=False,
        widget=forms.PasswordInput(attrs={
            'autocomplete': 'current-password',
        })
    )

    error_messages = {
        'not_admin': "You must be an admin to access this page.",
        'no_token': "Login failed: the server did not return a token.",
        'unknown': "An error occurred.",
    }

    def __init__(self, client, *args, **kwargs):
        self.client = client
        self.payload = None
        super().__init__(*args, **kwargs)

    def clean(self):
        cleaned_data = super().clean()
        username = cleaned_data.get('username')
        password = cleaned_data.get('password')
        if not username or not password:
            return cleaned_data

        try:
            payload = api_login(self.client, username, password) or {}
        except TransportError as e:
            raise forms.ValidationError(e.message or self.error_messages['unknown'])

        user = payload.get('user') or {}
        if user.get('role_id') != settings.API_ADMIN_ROLE_ID:
            raise forms.ValidationError(self.error_messages['not_admin'], code='not_admin')
        if not payload.get('token'):
            raise forms.ValidationError(self.error_messages['no_token'], code='no_token')

        self.payload = payload
        return cleaned_data

    def get_payload(self):
        return self.payload


class RoleChoiceMixin:
    """Fill the role select from the roles returned by ``GET /role/all``."""

    def set_roles(self, roles):
        self.fields['role_id'].choices = [
            (str(role.get('id')), role.get('name', role.get('id')))
            for role in roles
        ]


class UserCreateForm(RoleChoiceMixin, forms.Form):
    username = forms.CharField(
        max_length=150,
        error_messages={'required': "Username is required"},
    )
    password = forms.CharField(
        strip=False,
        widget=forms.PasswordInput,
        error_messages={'required': "Password is required"},
    )
    role_id = forms.ChoiceField(label="Role", choices=())

    def __init__(self, *args, roles=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.set_roles(roles)

    def clean_username(self):
        username = self.cleaned_data['username'].strip()
        if not username:
            raise forms.ValidationError("Username is required")
        return username

    def clean_password(self):
        password = self.cleaned_data['password']
        if not password.strip():
            raise forms.ValidationError("Password is required")
        if len(password) < 6:
            raise forms.ValidationError("Password must be at least 6 characters")
        return password

    def to_api(self):
        return {
            'username': self.cleaned_data['username'],
            'password': self.cleaned_data['password'],
            'role_id': int(self.cleaned_data['role_id']),
        }


class UserEditForm(RoleChoiceMixin, forms.Form):
    username = forms.CharField(
        max_length=150,
        error_messages={'required': "Username is required"},
    )
    role_id = forms.ChoiceField(label="Role", choices=())

    def __init__(self, *args, roles=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.set_roles(roles)

    def clean_username(self):
        username = self.cleaned_data['username'].strip()
        if not username:
            raise forms.ValidationError("Username is required")
        return username
