import logging
import os
import re
from pydantic import ValidationError as SchemaValidationError
from kindergarten.errors import ConflictError, UpstreamError, ValidationError
from kindergarten.models.student import DOCUMENT_FIELDS
from kindergarten.repositories import StudentRepository
from kindergarten.schemas import StudentCreate
from kindergarten.services.roster import RosterService
from kindergarten.utils.excel import export_students_to_excel, read_student_rows
from kindergarten.utils.media import get_media_host

logger = logging.getLogger(__name__)

DATA_URI_PATTERN = re.compile(r'^data:(image/[a-z+.-]+|application/pdf);base64,')


def extract_documents(body):
    """Document values sent either at the top level or under ``studentDocument``."""
    nested = body.get('studentDocument') or {}
    return {field: body.get(field, nested.get(field)) for field in DOCUMENT_FIELDS
            if field in body or field in nested}


class StudentService:

    def __init__(self, session, media_host=None, folder='kindergarten/students'):
        self.session = session
        self.students = StudentRepository(session)
        self.roster = RosterService(session)
        self.folder = folder
        self._media_host = media_host

    @property
    def media(self):
        if self._media_host is None:
            self._media_host = get_media_host()
        return self._media_host

    def get_all_students(self):
        return self.students.find_all()

    def get_student(self, id):
        return self.students.find_by_id(id)

    def get_students_by_class(self, class_name):
        return self.students.find_by_class(class_name)

    def search_students(self, term):
        return self.students.search(term)

    def create_student(self, payload, documents=None):
        record = payload.to_record()
        if self.students.find_by_student_id(record['student_id']):
            raise ConflictError('Student ID already exists')
        record['documents'], _ = self._resolve_documents({}, documents or {})
        student = self.students.create(record)
        logger.info(f"Created student {student.student_id}")
        return student

    def update_student(self, id, payload, documents=None):
        student = self.students.find_by_id(id)
        record = {k: v for k, v in payload.to_record(partial=True).items() if v is not None}
        if record.pop('student_id', student.student_id) != student.student_id:
            raise ValidationError('studentID cannot be changed')
        if documents:
            record['documents'], replaced = self._resolve_documents(student.documents, documents)
        else:
            replaced = []
        student = self.students.update(id, record)
        self._destroy_quietly(replaced)
        return student

    def delete_student(self, id):
        student = self.students.find_by_id(id)
        public_ids = student.document_public_ids()
        owner = self.roster.detach_student(student.student_id)
        self.students.delete(id)
        if owner is not None:
            logger.info(f"Removed deleted student {student.student_id} from class {owner.id}")
        self._destroy_quietly(public_ids)
        return True

    def upload_file(self, file, field='photos'):
        if file is None or not file.filename:
            raise ValidationError('Please upload a file')
        return self.media.upload(file, f'{self.folder}/{field}')

    def import_students(self, file):
        if file is None or not file.filename:
            raise ValidationError('No file provided')
        extension = os.path.splitext(file.filename)[1].lower()
        if extension != '.xlsx':
            raise ValidationError('Invalid file format. Please upload an Excel (.xlsx) file')

        existing = self.students.existing_student_ids()
        records = []
        failed = []
        for row_number, row in read_student_rows(file.stream):
            student_id = row.get('studentID')
            if not student_id:
                failed.append({'row': row_number, 'error': 'Missing studentID'})
                continue
            if student_id in existing:
                failed.append({'row': row_number, 'error': f'Duplicate studentID: {student_id}'})
                continue
            try:
                record = StudentCreate.model_validate(row).to_record()
            except SchemaValidationError as e:
                failed.append({'row': row_number, 'error': '; '.join(err['msg'] for err in e.errors())})
                continue
            record['documents'] = {}
            records.append(record)
            existing.add(student_id)

        if not records:
            raise ValidationError('No valid student data found in the file', errors=failed)
        self.students.add_all(records)
        logger.info(f"Imported {len(records)} students, skipped {len(failed)} rows")
        return {'count': len(records), 'failed': failed}

    def export_students(self, fmt, student_ids=None):
        students = self.students.find_all()
        if student_ids:
            wanted = set(student_ids)
            students = [s for s in students if s.id in wanted or s.student_id in wanted]
        if not students:
            raise ValidationError('No students data provided')
        if fmt == 'xlsx':
            return export_students_to_excel(students)
        if fmt == 'json':
            return [s.to_dict() for s in students]
        raise ValidationError('Invalid export format')

    def _resolve_documents(self, current, incoming):
        documents = dict(current or {})
        replaced = []
        for field, value in incoming.items():
            previous = documents.get(field)
            if isinstance(value, str) and value.startswith('data:'):
                if not DATA_URI_PATTERN.match(value):
                    raise ValidationError(f'Invalid file format for {field}')
                documents[field] = self.media.upload(value, f'{self.folder}/{field}')
            elif isinstance(value, dict):
                documents[field] = {'url': value.get('url', ''), 'public_id': value.get('public_id', '')}
            elif value in (None, ''):
                documents[field] = None
            else:
                raise ValidationError(f'Invalid value for {field}')
            if isinstance(previous, dict) and previous.get('public_id') and previous != documents[field]:
                replaced.append(previous['public_id'])
        return documents, replaced

    def _destroy_quietly(self, public_ids):
        for public_id in public_ids:
            try:
                self.media.destroy(public_id)
            except UpstreamError:
                logger.warning(f"Could not delete media {public_id}, it is now orphaned at the media host")
