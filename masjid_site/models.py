from datetime import datetime, timezone

from .entities import new_id
from .extensions import db


def utcnow():
    return datetime.now(timezone.utc)


# --- Database Models ---
class StoreSlot(db.Model):
    """One named slot of the side-store; ``payload`` holds a JSON array."""

    __tablename__ = 'store_slots'

    slot = db.Column(db.String(50), primary_key=True)
    payload = db.Column(db.Text, nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)


class AdminUser(db.Model):
    __tablename__ = 'admin_users'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    username = db.Column(db.String(100), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)


class ActivityRegistration(db.Model):
    __tablename__ = 'activity_registrations'

    id = db.Column(db.String(36), primary_key=True, default=new_id)
    full_name = db.Column(db.String(200), nullable=False)
    phone_number = db.Column(db.String(30), nullable=False)
    email = db.Column(db.String(200), nullable=False)
    activity_name = db.Column(db.String(200), nullable=False)
    activity_id = db.Column(db.String(36), nullable=True)
    registration_date = db.Column(db.String(40), nullable=False)
    created_at = db.Column(db.DateTime, default=utcnow)
