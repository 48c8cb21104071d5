import io
import logging
import zipfile

import pandas as pd

from .errors import ValidationFailure
from .models import StudentRecord
from .naming import check_roll_number

logger = logging.getLogger(__name__)

ROLL_COLUMNS = ("roll_no", "RollNo")


def _frame_to_students(df):
    if df.empty:
        raise ValidationFailure("CSV file is empty or invalid format")

    present = [c for c in ROLL_COLUMNS if c in df.columns]
    if not present:
        raise ValidationFailure("CSV file must contain 'RollNo' or 'roll_no' column")

    df = df.fillna("").astype(str)

    students = []
    for position, (_, row) in enumerate(df.iterrows(), start = 1):
        roll_no = ""
        for column in present:
            roll_no = row[column].strip()
            if roll_no:
                break
        if not roll_no:
            raise ValidationFailure(f"Row {position} has no roll number", row=position)
        roll_no = check_roll_number(roll_no, row=position)

        fields = {str(k): v for k, v in row.items() if k not in present}
        students.append(StudentRecord(roll_no = roll_no, fields = fields))

    return students


def student_import_csv(file_like):
    try:
        df = pd.read_csv(file_like, dtype = str, keep_default_na = False)
    except (pd.errors.EmptyDataError, pd.errors.ParserError, UnicodeDecodeError) as e:
        raise ValidationFailure(f"Error reading file: {e}")
    return _frame_to_students(df)


def student_import_excel(file_like):
    try:
        df = pd.read_excel(file_like, dtype = str, engine = "openpyxl")
    except (ValueError, zipfile.BadZipFile) as e:
        raise ValidationFailure(f"Excel read failed: {e}")
    return _frame_to_students(df)


def load_students(content, filename, max_bytes=None):
    """Parse uploaded bytes into students, in file order."""
    if max_bytes is not None and len(content) > max_bytes:
        raise ValidationFailure("File too large", limit=max_bytes, size=len(content))

    buffer = io.BytesIO(content)
    if filename and filename.lower().endswith(".xlsx"):
        students = student_import_excel(buffer)
    elif filename and not filename.lower().endswith(".csv"):
        raise ValidationFailure("Invalid file type. Only CSV or .xlsx files are allowed.", filename=filename)
    else:
        students = student_import_csv(buffer)

    logger.info("Imported %d students from %s", len(students), filename)
    return students
