from django import forms

from .extraction import validate_resume_upload, ResumeParseError
from .models import Resume


def _check_resume(upload):
    try:
        validate_resume_upload(upload)
    except ResumeParseError as exc:
        raise forms.ValidationError(exc.user_message, code=exc.code)
    return upload


class ResumeUploadForm(forms.ModelForm):
    class Meta:
        model = Resume
        fields = ["file", "title"]

    def clean_file(self):
        return _check_resume(self.cleaned_data["file"])


class ResumeParseForm(forms.Form):
    resume = forms.FileField()
    job_id = forms.IntegerField(required=False)
    skills = forms.CharField(required=False)
