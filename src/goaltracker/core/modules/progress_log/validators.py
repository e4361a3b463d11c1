import math

from goaltracker.core.modules.progress_log.models import ProgressLogFields
from goaltracker.errors import ValidationError


def validate_log_fields(note: str, metric_name: str = "", metric_value: str = "") -> ProgressLogFields:
    """Validate raw form input for a progress log entry."""
    errors: dict[str, str] = {}
    note = note.strip()
    metric_name = metric_name.strip()
    metric_value = metric_value.strip()

    if not note:
        errors["note"] = "Note required"

    value = None
    if metric_value:
        try:
            value = float(metric_value)
        except ValueError:
            errors["metric_value"] = "Value must be a number"
        else:
            if not math.isfinite(value):
                errors["metric_value"] = "Value must be a number"

    if errors:
        raise ValidationError(errors=errors)
    return ProgressLogFields(note=note, metric_name=metric_name or None, metric_value=value)
