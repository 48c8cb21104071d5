import re

from .config import DEFAULT_DATASET_PREFIX
from .errors import ValidationFailure

_WHITESPACE = re.compile(r"\s+")
_ALLOWED = re.compile(r"^[a-z0-9_\-]+$")
_PREFIX_ALLOWED = re.compile(r"^[a-z][a-z0-9_]*$")

MAX_NAME_LENGTH = 64


def canonicalize(subject, prefix=DEFAULT_DATASET_PREFIX):
    """
    Map a subject label to the dataset name every component uses.

    Lowercases, collapses whitespace runs to one underscore and prepends the
    prefix. The result is checked against an allow-list before it is handed to
    anything that names storage, so "Data Structures" becomes
    "allocation_data_structures" and "Math; DROP" is rejected.
    """
    if subject is None or not str(subject).strip():
        raise ValidationFailure("Subject is required.")
    if not _PREFIX_ALLOWED.match(prefix):
        raise ValidationFailure("Invalid dataset prefix", prefix=prefix)

    body = _WHITESPACE.sub("_", str(subject).strip().lower())
    if not _ALLOWED.match(body):
        raise ValidationFailure(
            "Subject may only contain letters, digits, spaces, '_' and '-'",
            subject=subject,
        )

    name = prefix + body
    if len(name) > MAX_NAME_LENGTH:
        raise ValidationFailure(
            f"Subject is too long (max {MAX_NAME_LENGTH - len(prefix)} characters)",
            subject=subject,
        )
    return name


def check_roll_number(roll_no, **context):
    """Stripped roll number; rosters are stored comma-joined, so a comma cannot be part of one."""
    roll_no = (roll_no or "").strip()
    if not roll_no:
        raise ValidationFailure("Roll number is required.", **context)
    if "," in roll_no:
        raise ValidationFailure("Roll number must not contain ','", roll_number=roll_no, **context)
    return roll_no
