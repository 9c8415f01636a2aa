from datetime import date, datetime
from io import BytesIO
import re
from openpyxl import Workbook, load_workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter
from kindergarten.errors import ValidationError
from kindergarten.utils.helpers import format_date

XLSX_MIMETYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

EDGE = Side(style='thin')
GRID = Border(left=EDGE, right=EDGE, top=EDGE, bottom=EDGE)

HEADER_STYLE = {
    'font': Font(name='Arial', size=12, bold=True),
    'fill': PatternFill(start_color='E0E0E0', end_color='E0E0E0', fill_type='solid'),
    'alignment': Alignment(horizontal='center', vertical='center', wrap_text=True),
}
BODY_STYLE = {
    'font': Font(name='Arial', size=11),
    'alignment': Alignment(vertical='center', wrap_text=True),
}
DEFAULT_WIDTH = 20

# (header, import key, record attribute, width)
STUDENT_COLUMNS = [
    ("Student ID", "studentid", "studentID", 15),
    ("Full Name", "name", "name", 30),
    ("Date of Birth", "dateofbirth", "dateOfBirth", 15),
    ("Gender", "gender", "gender", 10),
    ("Grade Level", "gradelevel", "gradeLevel", 15),
    ("School", "school", "school", 30),
    ("Class", "class", "class", 15),
    ("Education System", "educationsystem", "educationSystem", 20),
    ("Father's Name", "fatherfullname", "fatherFullname", 30),
    ("Father's Occupation", "fatheroccupation", "fatherOccupation", 30),
    ("Mother's Name", "motherfullname", "motherFullname", 30),
    ("Mother's Occupation", "motheroccupation", "motherOccupation", 30),
]

DOCUMENT_COLUMNS = [
    ("Image", "image", 30),
    ("Birth Certificate", "birthCertificate", 30),
    ("Household Registration", "householdRegistration", 30),
]


def _apply(cell, style):
    cell.border = GRID
    for attribute, value in style.items():
        setattr(cell, attribute, value)


def create_styled_workbook(title, headers, data, column_widths=None):
    """Single-sheet workbook: grey bold header row frozen above bordered data rows."""
    wb = Workbook()
    ws = wb.active
    ws.title = title
    ws.append(list(headers))
    for row in data:
        ws.append(list(row))

    for row_cells in ws.iter_rows(min_row=1, max_row=ws.max_row, max_col=len(headers)):
        style = HEADER_STYLE if row_cells[0].row == 1 else BODY_STYLE
        for cell in row_cells:
            _apply(cell, style)

    widths = list(column_widths or [])
    for position in range(len(headers)):
        width = widths[position] if position < len(widths) else DEFAULT_WIDTH
        ws.column_dimensions[get_column_letter(position + 1)].width = width
    ws.freeze_panes = 'A2'

    buffer = BytesIO()
    wb.save(buffer)
    buffer.seek(0)
    return buffer


def export_students_to_excel(students):
    headers = [c[0] for c in STUDENT_COLUMNS] + [c[0] for c in DOCUMENT_COLUMNS]
    widths = [c[3] for c in STUDENT_COLUMNS] + [c[2] for c in DOCUMENT_COLUMNS]

    data = []
    for student in students:
        record = student.to_dict()
        documents = record['studentDocument']
        row = [record.get(c[2]) if record.get(c[2]) is not None else "" for c in STUDENT_COLUMNS]
        row += [(documents.get(c[1]) or {}).get('url', "") for c in DOCUMENT_COLUMNS]
        data.append(row)

    return create_styled_workbook("Students", headers, data, widths)


def export_teachers_to_excel(teachers):
    headers = ["Teacher ID", "Last Name", "First Name", "Gender", "Phone", "Date of Birth"]
    data = [[t.teacher_id, t.last_name, t.first_name, t.gender or "", t.phone or "", t.date_of_birth or ""]
            for t in teachers]
    return create_styled_workbook("Teachers", headers, data, [15, 20, 20, 10, 15, 15])


def _cell_text(value):
    if value is None:
        return ""
    if isinstance(value, (datetime, date)):
        return format_date(value)
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value).strip()


def _header_key(value):
    return re.sub(r'[^a-z0-9]', '', _cell_text(value).lower())


def read_student_rows(stream):
    """Yield ``(row_number, wire_dict)`` for each data row of the first sheet.

    Columns are matched by header text, either the export titles or the
    lowercased field names (case and punctuation ignored).
    A sheet whose header row names none of the known columns is read in
    export column order.
    """
    try:
        wb = load_workbook(stream, read_only=True, data_only=True)
    except Exception as e:
        raise ValidationError(f'Invalid Excel file: {e}')
    ws = wb.worksheets[0] if wb.worksheets else None
    if ws is None:
        raise ValidationError('No worksheet found in the Excel file')

    rows = ws.iter_rows(values_only=True)
    header = next(rows, None) or ()
    headers = {_header_key(v): idx for idx, v in enumerate(header) if v is not None}
    column_map = {}
    for title, key, _, _ in STUDENT_COLUMNS:
        idx = headers.get(key, headers.get(_header_key(title)))
        if idx is not None:
            column_map[key] = idx
    if not column_map:
        column_map = {c[1]: position for position, c in enumerate(STUDENT_COLUMNS)}

    for row_number, values in enumerate(rows, 2):
        if not values or all(v is None for v in values):
            continue
        record = {}
        for _, key, attribute, _ in STUDENT_COLUMNS:
            idx = column_map.get(key)
            record[attribute] = _cell_text(values[idx]) if idx is not None and idx < len(values) else ""
        yield row_number, record
