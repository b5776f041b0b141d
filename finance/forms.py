from decimal import Decimal

from django import forms


SALARY_STATUS_CHOICES = [
    ('active', 'Active'),
    ('completed', 'Completed'),
]

PAYMENT_STATUS_CHOICES = [
    ('pending', 'Pending'),
    ('paid', 'Paid'),
]


def _number(value):
    """JSON-friendly number: ints stay ints, other decimals become floats."""
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    return value


class SalaryListCreateForm(forms.Form):
    """Form for opening a new salary list."""

    month_year = forms.CharField(
        label="Month-Year",
        max_length=20,
        widget=forms.TextInput(attrs={'placeholder': 'e.g., 2024-05'}),
        error_messages={'required': "Month-Year is required"},
    )
    daily_rate = forms.DecimalField(
        label="Daily Rate",
        min_value=0,
        error_messages={
            'required': "Valid daily rate is required",
            'invalid': "Valid daily rate is required",
        },
    )

    def to_api(self):
        return {
            'monthYear': self.cleaned_data['month_year'],
            'dailyRate': _number(self.cleaned_data['daily_rate']),
        }


class SalaryListEditForm(forms.Form):
    title = forms.CharField(
        max_length=200,
        error_messages={'required': "Title is required"},
    )
    month_year = forms.CharField(
        label="Month-Year",
        max_length=20,
        error_messages={'required': "Month-Year is required"},
    )
    daily_rate = forms.DecimalField(
        label="Daily Rate",
        min_value=0,
        error_messages={
            'required': "Valid daily rate is required",
            'invalid': "Valid daily rate is required",
        },
    )
    status = forms.ChoiceField(
        choices=SALARY_STATUS_CHOICES,
        error_messages={'required': "Status is required"},
    )
    total_records = forms.IntegerField(
        label="Total Records",
        min_value=0,
        error_messages={
            'required': "Valid total records is required",
            'invalid': "Valid total records is required",
        },
    )

    def to_api(self):
        data = dict(self.cleaned_data)
        data['daily_rate'] = _number(data['daily_rate'])
        return data


class PaymentStatusForm(forms.Form):
    payment_status = forms.ChoiceField(
        label="Payment Status",
        choices=PAYMENT_STATUS_CHOICES,
        error_messages={'required': "Payment status is required"},
    )
