import pytest

from exam_roster.errors import ValidationFailure
from exam_roster.naming import canonicalize


def test_lowercases_and_collapses_whitespace():
    assert canonicalize("Math") == "allocation_math"
    assert canonicalize("  Data   Structures\tII ") == "allocation_data_structures_ii"


def test_custom_prefix():
    assert canonicalize("Math", prefix = "seating_") == "seating_math"


def test_underscores_in_subject_are_kept():
    assert canonicalize("sem_3 os") == "allocation_sem_3_os"


@pytest.mark.parametrize("subject", ["", "   ", None, "math; drop table", "x`y", "a/b", "ma'th"])
def test_rejects_blank_or_unsafe_labels(subject):
    with pytest.raises(ValidationFailure):
        canonicalize(subject)


def test_rejects_overlong_label():
    with pytest.raises(ValidationFailure):
        canonicalize("x" * 80)


def test_rejects_bad_prefix():
    with pytest.raises(ValidationFailure):
        canonicalize("Math", prefix = "drop table;")
