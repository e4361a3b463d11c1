from goaltracker.core.modules.goal.models import GoalFields
from goaltracker.errors import ValidationError
from goaltracker.utils import parse_date

MAX_TITLE_LENGTH = 200


def validate_goal_fields(
    title: str,
    description: str = "",
    target_date: str = "",
    progress: str = "",
    archived: bool = False,
) -> GoalFields:
    """Validate raw form input for a goal.

    Blank optional fields become None, progress defaults to 0.

    Raises:
        ValidationError: With one message per offending field
    """
    errors: dict[str, str] = {}
    title = title.strip()
    description = description.strip()
    target_date = target_date.strip()
    progress = progress.strip()

    if not title:
        errors["title"] = "Title required"
    elif len(title) > MAX_TITLE_LENGTH:
        errors["title"] = f"Title must be at most {MAX_TITLE_LENGTH} characters"

    parsed_date = None
    if target_date:
        try:
            parsed_date = parse_date(target_date)
        except ValueError:
            errors["target_date"] = "Target date must be a valid date (YYYY-MM-DD)"

    parsed_progress = 0
    if progress:
        try:
            parsed_progress = int(progress)
        except ValueError:
            errors["progress"] = "Progress must be a whole number"
        else:
            if not 0 <= parsed_progress <= 100:
                errors["progress"] = "Progress must be between 0 and 100"

    if errors:
        raise ValidationError(errors=errors)

    return GoalFields(
        title=title,
        description=description or None,
        target_date=parsed_date,
        progress=parsed_progress,
        archived=archived,
    )
