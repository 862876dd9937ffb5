# forms.py
from flask_wtf import FlaskForm
from werkzeug.datastructures import MultiDict
from wtforms import DateField, IntegerField, StringField
from wtforms.validators import InputRequired, NumberRange, Optional

from gantt_server.data import DATE_FORMAT, Task

# SQLite INTEGER is a signed 64-bit value
INT64_MIN = -2 ** 63
INT64_MAX = 2 ** 63 - 1

INT_FIELDS = ('id', 'durationDays', 'priority')
STR_FIELDS = ('name', 'start', 'color')


class TaskForm(FlaskForm):
    """Validates one task object of a POSTed collection."""

    class Meta:
        # JSON API, no browser form to protect
        csrf = False

    id = IntegerField('id', validators=[InputRequired(), NumberRange(min=INT64_MIN, max=INT64_MAX)])
    name = StringField('name', validators=[Optional()])
    start = DateField('start', format=DATE_FORMAT, validators=[InputRequired()])
    durationDays = IntegerField('durationDays', validators=[InputRequired(), NumberRange(min=0, max=INT64_MAX)])
    color = StringField('color', validators=[Optional()])
    priority = IntegerField('priority', validators=[InputRequired(), NumberRange(min=INT64_MIN, max=INT64_MAX)])

    def to_task(self):
        return Task(
            id=self.id.data,
            name=self.name.data or '',
            start=self.start.data.strftime(DATE_FORMAT),
            duration_days=self.durationDays.data,
            color=self.color.data or '',
            priority=self.priority.data,
        )


class PayloadError(ValueError):
    """The POSTed collection is not acceptable; ``details`` maps index to field errors."""

    def __init__(self, message, details=None):
        super().__init__(message)
        self.details = details or {}


def _formdata(item):
    """Check JSON value types, then flatten the object into form data."""
    data = MultiDict()
    errors = {}
    for key, value in item.items():
        if value is None:
            continue
        if key in INT_FIELDS:
            if isinstance(value, bool) or not isinstance(value, int):
                errors[key] = ['Must be an integer']
                continue
        elif key in STR_FIELDS:
            if not isinstance(value, str):
                errors[key] = ['Must be a string']
                continue
        else:
            # unknown keys are ignored by the form
            continue
        data[key] = str(value)
    return data, errors


def parse_task_list(payload):
    """Turn a decoded JSON body into a list of tasks, or raise PayloadError."""
    if not isinstance(payload, list):
        raise PayloadError('Request body must be a JSON array of tasks')

    tasks = []
    details = {}
    for index, item in enumerate(payload):
        if not isinstance(item, dict):
            details[index] = {'task': ['Must be a JSON object']}
            continue
        formdata, value_errors = _formdata(item)
        form = TaskForm(formdata=formdata)
        errors = {} if form.validate() else dict(form.errors)
        errors.update(value_errors)
        if errors:
            details[index] = errors
            continue
        tasks.append(form.to_task())

    if details:
        raise PayloadError(f'{len(details)} invalid task(s) in request body', details)
    return tasks
