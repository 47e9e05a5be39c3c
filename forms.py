"""
forms.py — Flask-WTF form that turns raw request data into FormValues.

Accepts form-encoded or JSON bodies (Flask-WTF wraps JSON automatically).
The form only coerces types: a missing or non-numeric field becomes None.
Range checks live in utils/validators.py so they also apply outside a
request (CLI, tests).
"""

from flask import request
from flask_wtf import FlaskForm
from wtforms import IntegerField, StringField

from models import FormValues


class LenientIntegerField(IntegerField):
    """IntegerField that maps anything non-integral (including JSON null) to None."""

    def process_formdata(self, valuelist):
        if not valuelist:
            return
        value = valuelist[0]
        if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
            self.data = None
            return
        try:
            self.data = int(value)
        except (TypeError, ValueError):
            self.data = None


class OrderField(StringField):
    """Harvest order as a token string; a JSON list of numbers is joined with commas."""

    def process_formdata(self, valuelist):
        if valuelist:
            self.data = ','.join(str(v) for v in valuelist if v is not None)


class HarvestPlanForm(FlaskForm):
    """Harvest plan parameters as posted by the UI."""

    class Meta:
        # CSRFProtect already guards every POST
        csrf = False

    group_count = LenientIntegerField('Anzahl Gruppen')
    anode_days = LenientIntegerField('Anodentage')
    cathode_a = LenientIntegerField('Kathoden-Phase A')
    cathode_b = LenientIntegerField('Kathoden-Phase B')
    cathode_c = LenientIntegerField('Kathoden-Phase C')
    cleaning_days = LenientIntegerField('Reinigungstage')
    harvest_order = OrderField('Harvest-Reihenfolge')
    group_start_offset_days = LenientIntegerField('Startversatz')

    def to_form_values(self):
        return FormValues(
            group_count=self.group_count.data,
            anode_days=self.anode_days.data,
            cathode_a=self.cathode_a.data,
            cathode_b=self.cathode_b.data,
            cathode_c=self.cathode_c.data,
            cleaning_days=self.cleaning_days.data,
            harvest_order=self.harvest_order.data or '',
            group_start_offset_days=self.group_start_offset_days.data,
        )

    @classmethod
    def from_request(cls):
        """
        Build the form from the current request.

        A JSON body that is not an object (a list, a number) carries no
        fields, so it is read as an empty form and fails the required checks.
        """
        if request.is_json and not isinstance(request.get_json(silent=True), dict):
            return cls(formdata=None)
        return cls()
