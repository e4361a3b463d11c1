from goaltracker.core.modules.milestone.models import MilestoneFields
from goaltracker.errors import ValidationError
from goaltracker.utils import parse_date


def validate_milestone_fields(title: str, due: str = "") -> MilestoneFields:
    """Validate raw form input for a milestone.

    Raises:
        ValidationError: With one message per offending field
    """
    errors: dict[str, str] = {}
    title = title.strip()
    due = due.strip()

    if not title:
        errors["title"] = "Title required"

    parsed_due = None
    if due:
        try:
            parsed_due = parse_date(due)
        except ValueError:
            errors["due"] = "Due date must be a valid date (YYYY-MM-DD)"

    if errors:
        raise ValidationError(errors=errors)
    return MilestoneFields(title=title, due=parsed_due)
