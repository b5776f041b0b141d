from django import forms


ATTENDANCE_STATUS_CHOICES = [
    ('active', 'Active'),
    ('closed', 'Closed'),
]


class AttendanceListForm(forms.Form):
    title = forms.CharField(
        max_length=200,
        error_messages={'required': "Title is required"},
    )
    status = forms.ChoiceField(
        choices=ATTENDANCE_STATUS_CHOICES,
        error_messages={'required': "Status is required"},
    )


class AttendanceRecordForm(forms.Form):
    attended = forms.BooleanField(required=False)


class VocabListForm(forms.Form):
    title = forms.CharField(
        max_length=200,
        error_messages={'required': "Title is required"},
    )
    description = forms.CharField(
        widget=forms.Textarea(attrs={'rows': 3}),
        error_messages={'required': "Description is required"},
    )
    category = forms.CharField(
        max_length=100,
        error_messages={'required': "Category is required"},
    )


PART_OF_SPEECH_CHOICES = [
    ('noun', 'Noun'),
    ('verb', 'Verb'),
    ('adjective', 'Adjective'),
    ('adverb', 'Adverb'),
    ('pronoun', 'Pronoun'),
    ('preposition', 'Preposition'),
    ('phrase verb', 'Phrase verb'),
    ('collocation', 'Collocation'),
]


class VocabForm(forms.Form):
    word = forms.CharField(
        max_length=200,
        error_messages={'required': "Word is required"},
    )
    translation = forms.CharField(max_length=200, required=False)
    definition = forms.CharField(widget=forms.Textarea(attrs={'rows': 2}), required=False)
    part_of_speech = forms.ChoiceField(label="Type of word", choices=PART_OF_SPEECH_CHOICES)
    example_sentence = forms.CharField(widget=forms.Textarea(attrs={'rows': 2}), required=False)
    synonyms = forms.CharField(max_length=300, required=False)
    antonyms = forms.CharField(max_length=300, required=False)
