import io

import pandas as pd
import pytest

from exam_roster.errors import ValidationFailure
from exam_roster.student_import import load_students


def test_reads_roll_no_column_in_file_order():
    content = b"roll_no,name\nr3,Cara\nr1,Ann\nr2,Bob\n"
    students = load_students(content, "students.csv")
    assert [s.roll_no for s in students] == ["r3", "r1", "r2"]
    assert students[0].fields == {"name": "Cara"}


def test_accepts_rollno_column_and_keeps_leading_zeros():
    students = load_students(b"RollNo\n007\n010\n", "students.csv")
    assert [s.roll_no for s in students] == ["007", "010"]


def test_either_column_may_carry_the_roll_number():
    students = load_students(b"roll_no,RollNo\nr1,\n,r2\n", "mixed.csv")
    assert [s.roll_no for s in students] == ["r1", "r2"]


def test_missing_roll_column():
    with pytest.raises(ValidationFailure):
        load_students(b"name\nAnn\n", "students.csv")


def test_row_without_roll_number_is_rejected():
    with pytest.raises(ValidationFailure) as excinfo:
        load_students(b"roll_no,name\nr1,Ann\n,Bob\n", "students.csv")
    assert excinfo.value.context["row"] == 2


def test_empty_file():
    with pytest.raises(ValidationFailure):
        load_students(b"", "students.csv")
    with pytest.raises(ValidationFailure):
        load_students(b"roll_no,name\n", "students.csv")


def test_too_large():
    with pytest.raises(ValidationFailure):
        load_students(b"roll_no\n" + b"r1\n" * 100, "students.csv", max_bytes = 50)


def test_unsupported_extension():
    with pytest.raises(ValidationFailure):
        load_students(b"roll_no\nr1\n", "students.txt")


def test_excel_upload():
    buf = io.BytesIO()
    pd.DataFrame({"roll_no": ["e1", "e2"], "year": ["2", "3"]}).to_excel(buf, index = False)
    students = load_students(buf.getvalue(), "students.xlsx")
    assert [s.roll_no for s in students] == ["e1", "e2"]
    assert students[1].fields == {"year": "3"}


def test_quoted_comma_in_roll_number_is_rejected():
    with pytest.raises(ValidationFailure) as excinfo:
        load_students(b'roll_no\n"a,b"\nc\n', "students.csv")
    assert excinfo.value.context["row"] == 1


def test_legacy_xls_is_not_accepted():
    ole2 = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1" + b"\x00" * 512
    with pytest.raises(ValidationFailure):
        load_students(ole2, "students.xls")
    with pytest.raises(ValidationFailure):
        load_students(ole2, "students.xlsx")
