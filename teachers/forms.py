from django import forms

WEEKDAYS = ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday']


def parse_schedule_days(schedule):
    """
    Normalize a teacher's schedule to a list of weekday names in week order.

    The API stores it either as a list or as a comma-joined string; anything
    that is not a weekday name is dropped.
    """
    if not schedule:
        return []
    if isinstance(schedule, str):
        schedule = schedule.split(',')
    days = {str(day).strip() for day in schedule}
    return [day for day in WEEKDAYS if day in days]


class TeacherForm(forms.Form):
    scheduleDate = forms.MultipleChoiceField(
        label="Schedule Days",
        choices=[(day, day) for day in WEEKDAYS],
        widget=forms.CheckboxSelectMultiple,
        required=False,
    )

    def to_api(self):
        return {'scheduleDate': parse_schedule_days(self.cleaned_data['scheduleDate'])}
