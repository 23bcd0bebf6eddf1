# room/forms.py

from django import forms

from .models import Room


class RoomForm(forms.ModelForm):
    class Meta:
        model = Room
        fields = ["name", "code"]

    def clean_code(self):
        return (self.cleaned_data.get("code") or "").strip().upper()
