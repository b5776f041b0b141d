from django import forms


GENDER_CHOICES = [
    ('Boy', 'Boy'),
    ('Girl', 'Girl'),
]


def required_text(label, widget=None, message=None):
    return forms.CharField(
        label=label,
        widget=widget,
        error_messages={'required': message or f"{label} is required"},
    )


class StudentProfileForm(forms.Form):
    """Fields shared by the create and edit screens."""

    userFullName = required_text("Full name")
    nickname = required_text("Nickname")
    age = forms.IntegerField(
        label="Age",
        error_messages={
            'required': "Age is required",
            'invalid': "Age must be a positive number",
        },
    )
    gender = forms.ChoiceField(choices=GENDER_CHOICES, initial='Boy')
    address = required_text("Address", widget=forms.Textarea(attrs={'rows': 3}))

    def clean_age(self):
        age = self.cleaned_data['age']
        if age <= 0:
            raise forms.ValidationError("Age must be a positive number")
        return age

    def to_api(self):
        return {
            name: value
            for name, value in self.cleaned_data.items()
            if value is not None
        }


class StudentCreateForm(StudentProfileForm):
    username = required_text("Username")
    password = forms.CharField(
        strip=False,
        widget=forms.PasswordInput,
        error_messages={'required': "Password is required"},
    )

    field_order = ['userFullName', 'nickname', 'username', 'password', 'age', 'gender', 'address']

    def clean_password(self):
        password = self.cleaned_data['password']
        if not password.strip():
            raise forms.ValidationError("Password is required")
        if len(password) < 6:
            raise forms.ValidationError("Password must be at least 6 characters")
        return password


class StudentEditForm(StudentProfileForm):
    level = forms.IntegerField(label="Level", min_value=0, required=False)
    point = forms.IntegerField(
        label="Points",
        min_value=0,
        required=False,
        error_messages={'min_value': "Points must be a non-negative number"},
    )
    heart = forms.IntegerField(
        label="Hearts",
        min_value=0,
        required=False,
        error_messages={'min_value': "Hearts must be a non-negative number"},
    )


class StudentCounterForm(forms.Form):
    """Single integer sent to one of the point/heart/level endpoints."""

    value = forms.IntegerField(error_messages={'required': "This field is required"})

    def __init__(self, *args, label='Value', **kwargs):
        super().__init__(*args, **kwargs)
        self.fields['value'].label = label
        self.fields['value'].error_messages['required'] = f"{label} is required"
