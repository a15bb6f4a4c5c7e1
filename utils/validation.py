"""
Input checks shared by the public submission routes.

Every failure raises ``ValidationError`` with the message the front end shows
to the visitor, so wording changes here are user-visible.
"""
import re
from typing import Iterable, List, Optional

from utils.errors import ValidationError

EMAIL_REGEX = re.compile(r'^[^\s@]+@[^\s@]+\.[^\s@]+$')


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


def is_valid_email(email: Optional[str]) -> bool:
    return bool(email) and bool(EMAIL_REGEX.match(email))


def require_email(email: Optional[str]) -> str:
    """Return the normalized email or raise when it is missing or malformed."""
    normalized = normalize_email(email)
    if not normalized:
        raise ValidationError("Email is required")
    if not is_valid_email(normalized):
        raise ValidationError("Invalid email format")
    return normalized


def is_blank(value) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def require_fields(data: dict, fields: Iterable[str], message: Optional[str] = None) -> None:
    """Raise for the first blank field; ``message`` replaces the per-field text when given."""
    for field in fields:
        if is_blank(data.get(field)):
            raise ValidationError(message or f"{field} is required")


def parse_positive_int(value, message: str) -> int:
    try:
        number = int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(message)
    if number < 1:
        raise ValidationError(message)
    return number


def validate_custom_answers(questions: Optional[List[dict]], answers: Optional[dict]) -> dict:
    """Check volunteer answers against an opportunity's custom questions.

    Required questions need a non-blank answer. For select and checkbox
    questions at least one of the comma separated choices must be a listed
    option.
    """
    answers = answers or {}
    for question in questions or []:
        question_id = question.get('id')
        title = question.get('title', question_id)
        answer = answers.get(question_id)
        if question.get('required') and is_blank(answer):
            raise ValidationError(f'Custom question "{title}" is required')
        options = question.get('options') or []
        if question.get('type') in ('select', 'checkbox') and options and not is_blank(answer):
            selected = [choice.strip() for choice in str(answer).split(',')]
            if not any(choice in options for choice in selected):
                raise ValidationError(f'Invalid option selected for "{title}"')
    return {key: value for key, value in answers.items() if not is_blank(value)}
