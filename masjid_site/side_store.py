import logging

from .extensions import db
from .models import StoreSlot

logger = logging.getLogger(__name__)


class SideStore:
    """Key-value slots holding serialised collections.

    ``get`` returns the stored text or ``None`` when the slot was never
    written; ``set`` overwrites the whole slot.
    """

    def get(self, slot):
        raise NotImplementedError

    def set(self, slot, payload):
        raise NotImplementedError


class MemorySideStore(SideStore):
    def __init__(self, initial=None):
        self.slots = dict(initial or {})

    def get(self, slot):
        return self.slots.get(slot)

    def set(self, slot, payload):
        self.slots[slot] = payload


class SqlSideStore(SideStore):
    """Side-store kept in the ``store_slots`` table of the app database."""

    def __init__(self, app):
        self.app = app

    def get(self, slot):
        with self.app.app_context():
            row = db.session.get(StoreSlot, slot)
            return row.payload if row is not None else None

    def set(self, slot, payload):
        with self.app.app_context():
            row = db.session.get(StoreSlot, slot)
            if row is None:
                db.session.add(StoreSlot(slot=slot, payload=payload))
            else:
                row.payload = payload
            try:
                db.session.commit()
            except Exception:
                db.session.rollback()
                raise
        logger.debug('Slot %s written (%d bytes)', slot, len(payload))
