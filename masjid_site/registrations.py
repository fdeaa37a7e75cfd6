import logging
import re
from datetime import datetime, timezone

from .errors import RegistrationInvalid
from .extensions import db
from .models import ActivityRegistration

logger = logging.getLogger(__name__)

PHONE_RE = re.compile(r'^\d{10,}$')
EMAIL_DOMAIN = '@gmail.com'


def normalize_phone(phone):
    return re.sub(r'\s', '', phone or '')


def is_valid_phone(phone):
    return bool(PHONE_RE.match(normalize_phone(phone)))


def is_gmail_address(email):
    return (email or '').strip().lower().endswith(EMAIL_DOMAIN)


def validate(full_name, phone_number, email):
    errors = {}
    if not (full_name or '').strip():
        errors['full_name'] = 'Nama lengkap wajib diisi'
    if not (phone_number or '').strip():
        errors['phone_number'] = 'Nomor telepon wajib diisi'
    elif not is_valid_phone(phone_number):
        errors['phone_number'] = 'Nomor telepon harus minimal 10 digit angka'
    if not (email or '').strip():
        errors['email'] = 'Email wajib diisi'
    elif not is_gmail_address(email):
        errors['email'] = 'Email harus menggunakan domain @gmail.com'
    return errors


class RegistrationBook:
    """Sign-ups for activities, kept in the ``activity_registrations`` table.

    Registrations are written once and never updated.
    """

    def register(self, activity, full_name, phone_number, email):
        errors = validate(full_name, phone_number, email)
        if errors:
            raise RegistrationInvalid(errors)
        row = ActivityRegistration(
            full_name=full_name.strip(),
            phone_number=normalize_phone(phone_number),
            email=email.strip().lower(),
            activity_name=activity.name,
            activity_id=activity.id,
            registration_date=datetime.now(timezone.utc).isoformat(),
        )
        db.session.add(row)
        db.session.commit()
        logger.info('Registration %s for activity %s', row.id, activity.id)
        return row

    def list(self, search=None, activity_name=None, date=None):
        query = db.select(ActivityRegistration).order_by(ActivityRegistration.registration_date.desc())
        if activity_name:
            query = query.filter(ActivityRegistration.activity_name == activity_name)
        if date:
            query = query.filter(ActivityRegistration.registration_date.startswith(date.split('T')[0]))
        rows = db.session.execute(query).scalars().all()
        if search:
            term = search.lower()
            rows = [r for r in rows
                    if term in r.full_name.lower() or term in r.email.lower() or search in r.phone_number]
        return rows

    def activity_names(self):
        return sorted(db.session.execute(
            db.select(ActivityRegistration.activity_name).distinct()).scalars().all())
