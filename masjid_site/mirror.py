"""In-memory mirror of the site content.

The mirror owns six collections (leadership, facilities, activities,
photos, videos, messages). Every collection is seeded once from its slot
in the side-store, or from the built-in seed list when the slot is empty,
and every mutation rewrites the whole collection back to its slot.

Callers get feedback through the ``notify(message, category)`` callback
(``flash`` inside a request); operations never raise.
"""
import copy
import functools
import json
import logging
import threading
from datetime import datetime, timezone

from .entities import (
    ACTIVITY_CATEGORIES, PHOTO_CATEGORIES, Activity, ContactMessage, Facility,
    LeadershipMember, Photo, Video, new_id,
)
from .seeds import SEEDS

logger = logging.getLogger(__name__)

COLLECTIONS = {
    'leadership': (LeadershipMember, 'Data pengurus'),
    'facilities': (Facility, 'Fasilitas'),
    'activities': (Activity, 'Kegiatan'),
    'photos': (Photo, 'Foto'),
    'videos': (Video, 'Video'),
    'messages': (ContactMessage, 'Pesan'),
}


def _log_notification(message, category='info'):
    logger.info('[%s] %s', category, message)


def guarded(failure_message):
    """Turn any unexpected exception into a logged error notification."""
    def decorator(f):
        @functools.wraps(f)
        def wrapper(self, *args, **kwargs):
            try:
                return f(self, *args, **kwargs)
            except Exception:
                logger.exception('%s failed', f.__name__)
                self.notify(failure_message, 'error')
                return None
        return wrapper
    return decorator


class DataMirror:
    def __init__(self, side_store, notify=None, seeds=None):
        self.side_store = side_store
        self.notify = notify or _log_notification
        self._lock = threading.RLock()
        seeds = SEEDS if seeds is None else seeds
        self._data = {slot: self._load(slot, seeds.get(slot, [])) for slot in COLLECTIONS}

    # --- Loading & persistence ---

    def _load(self, slot, seed):
        entity_cls = COLLECTIONS[slot][0]
        raw = None
        try:
            raw = self.side_store.get(slot)
        except Exception:
            logger.exception('Reading slot %s failed, using seed data', slot)
        if raw is not None:
            try:
                items = json.loads(raw)
                if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
                    raise ValueError(f'slot {slot} is not a list of records')
                return [entity_cls.from_dict(item) for item in items]
            except (ValueError, TypeError):
                logger.warning('Slot %s holds unreadable data, using seed data', slot)
        return [entity_cls.from_dict(item) for item in copy.deepcopy(seed)]

    def serialize(self, slot):
        return json.dumps([record.to_dict() for record in self._data[slot]])

    def _persist(self, slot):
        try:
            self.side_store.set(slot, self.serialize(slot))
        except Exception:
            logger.exception('Writing slot %s to the side-store failed', slot)

    # --- Generic operations ---

    def _find(self, slot, record_id):
        for index, record in enumerate(self._data[slot]):
            if record.id == record_id:
                return index
        return None

    def _add(self, slot, record, message=None):
        label = COLLECTIONS[slot][1]
        with self._lock:
            self._data[slot].append(record)
            self.notify(message or f'{label} berhasil ditambahkan.', 'success')
            self._persist(slot)
        return copy.deepcopy(record)

    def _update(self, slot, record):
        entity_cls, label = COLLECTIONS[slot]
        if not isinstance(record, entity_cls):
            raise TypeError(f'{slot} expects {entity_cls.__name__}, got {type(record).__name__}')
        with self._lock:
            index = self._find(slot, record.id)
            if index is None:
                self.notify(f'{label} tidak ditemukan.', 'warning')
                result = None
            else:
                self._data[slot][index] = copy.deepcopy(record)
                self.notify(f'{label} berhasil diperbarui.', 'success')
                result = copy.deepcopy(record)
            self._persist(slot)
        return result

    def _delete(self, slot, record_id):
        label = COLLECTIONS[slot][1]
        with self._lock:
            self._data[slot] = [r for r in self._data[slot] if r.id != record_id]
            self.notify(f'{label} berhasil dihapus.', 'success')
            self._persist(slot)

    # --- Read access ---

    def all(self, slot):
        with self._lock:
            return copy.deepcopy(self._data[slot])

    def get(self, slot, record_id):
        with self._lock:
            index = self._find(slot, record_id)
            return copy.deepcopy(self._data[slot][index]) if index is not None else None

    @property
    def leadership(self):
        return self.all('leadership')

    @property
    def facilities(self):
        return self.all('facilities')

    @property
    def activities(self):
        return self.all('activities')

    @property
    def photos(self):
        return self.all('photos')

    @property
    def videos(self):
        return self.all('videos')

    @property
    def messages(self):
        return self.all('messages')

    def unread_messages(self):
        return [m for m in self.messages if not m.is_read]

    def activities_by_category(self, category):
        return [a for a in self.activities if a.category == category]

    def search_activities(self, term):
        term = (term or '').lower()
        return [a for a in self.activities
                if term in a.name.lower() or term in (a.description or '').lower()]

    def search_messages(self, term, unread_only=False):
        term = (term or '').lower()
        base = self.unread_messages() if unread_only else self.messages
        return [m for m in base
                if any(term in (value or '').lower() for value in (m.name, m.email, m.subject, m.message))]

    def counts(self):
        with self._lock:
            counts = {slot: len(records) for slot, records in self._data.items()}
            counts['unread_messages'] = sum(1 for m in self._data['messages'] if not m.is_read)
        return counts

    # --- Leadership ---

    @guarded('Gagal menambahkan data pengurus.')
    def add_leadership_member(self, name, position, education='', image_url=''):
        return self._add('leadership', LeadershipMember(
            id=new_id(), name=name, position=position,
            education=education or '', image_url=image_url or ''))

    @guarded('Gagal memperbarui data pengurus.')
    def update_leadership_member(self, member):
        return self._update('leadership', member)

    @guarded('Gagal menghapus data pengurus.')
    def delete_leadership_member(self, member_id):
        self._delete('leadership', member_id)

    # --- Facilities ---

    @guarded('Gagal menambahkan fasilitas.')
    def add_facility(self, name, description='', image_url=''):
        return self._add('facilities', Facility(
            id=new_id(), name=name, description=description or '', image_url=image_url or ''))

    @guarded('Gagal memperbarui fasilitas.')
    def update_facility(self, facility):
        return self._update('facilities', facility)

    @guarded('Gagal menghapus fasilitas.')
    def delete_facility(self, facility_id):
        self._delete('facilities', facility_id)

    # --- Activities ---

    @guarded('Gagal menambahkan kegiatan.')
    def add_activity(self, date, name, description='', image_url=None, category='community'):
        if category not in ACTIVITY_CATEGORIES:
            raise ValueError(f'Unknown activity category: {category!r}')
        return self._add('activities', Activity(
            id=new_id(), date=date, name=name, description=description or '',
            image_url=image_url or None, category=category))

    @guarded('Gagal memperbarui kegiatan.')
    def update_activity(self, activity):
        if activity.category not in ACTIVITY_CATEGORIES:
            raise ValueError(f'Unknown activity category: {activity.category!r}')
        return self._update('activities', activity)

    @guarded('Gagal menghapus kegiatan.')
    def delete_activity(self, activity_id):
        self._delete('activities', activity_id)

    # --- Photos ---

    @guarded('Gagal menambahkan foto.')
    def add_photo(self, name, image_url, description='', category='Events'):
        if category not in PHOTO_CATEGORIES:
            raise ValueError(f'Unknown photo category: {category!r}')
        return self._add('photos', Photo(
            id=new_id(), name=name, image_url=image_url,
            description=description or '', category=category))

    @guarded('Gagal memperbarui foto.')
    def update_photo(self, photo):
        if photo.category not in PHOTO_CATEGORIES:
            raise ValueError(f'Unknown photo category: {photo.category!r}')
        return self._update('photos', photo)

    @guarded('Gagal menghapus foto.')
    def delete_photo(self, photo_id):
        self._delete('photos', photo_id)

    # --- Videos ---

    @guarded('Gagal menambahkan video.')
    def add_video(self, name, video_url, description='', thumbnail_url=None):
        return self._add('videos', Video(
            id=new_id(), name=name, video_url=video_url,
            description=description or '', thumbnail_url=thumbnail_url or None))

    @guarded('Gagal memperbarui video.')
    def update_video(self, video):
        return self._update('videos', video)

    @guarded('Gagal menghapus video.')
    def delete_video(self, video_id):
        self._delete('videos', video_id)

    # --- Contact messages ---

    @guarded('Gagal mengirim pesan.')
    def add_message(self, name, email, subject, message):
        record = ContactMessage(
            id=new_id(), name=name, email=email, subject=subject, message=message,
            date=datetime.now(timezone.utc).isoformat(), is_read=False)
        return self._add('messages', record, message='Pesan berhasil dikirim.')

    @guarded('Gagal memperbarui status pesan.')
    def update_message_read_status(self, message_id, is_read):
        # No notification here: this runs every time an admin opens a message.
        with self._lock:
            index = self._find('messages', message_id)
            if index is not None:
                self._data['messages'][index].is_read = bool(is_read)
            self._persist('messages')

    @guarded('Gagal menghapus pesan.')
    def delete_message(self, message_id):
        self._delete('messages', message_id)
