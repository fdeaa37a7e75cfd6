import json
import unittest
from datetime import datetime, timezone

from masjid_site.entities import Activity, Facility, LeadershipMember
from masjid_site.mirror import COLLECTIONS, DataMirror
from masjid_site.seeds import SEEDS
from masjid_site.side_store import MemorySideStore


class CountingSideStore(MemorySideStore):
    def __init__(self, initial=None):
        super().__init__(initial)
        self.writes = []

    def set(self, slot, payload):
        self.writes.append(slot)
        super().set(slot, payload)


class BrokenSideStore(MemorySideStore):
    def set(self, slot, payload):
        raise IOError('disk full')


class MirrorTests(unittest.TestCase):
    def setUp(self):
        self.notifications = []
        self.store = CountingSideStore()
        self.mirror = DataMirror(self.store, notify=self.record)

    def record(self, message, category='info'):
        self.notifications.append((category, message))

    def test_seeds_used_when_slots_are_empty(self):
        self.assertEqual([m.name for m in self.mirror.leadership],
                         [m['name'] for m in SEEDS['leadership']])
        self.assertEqual(self.mirror.messages, [])
        self.assertEqual(self.store.writes, [])

    def test_stored_slot_wins_over_seed(self):
        stored = [{'id': 'f-1', 'name': 'Aula', 'description': 'Serbaguna', 'image_url': ''}]
        mirror = DataMirror(MemorySideStore({'facilities': json.dumps(stored)}), notify=self.record)
        self.assertEqual(mirror.facilities, [Facility(id='f-1', name='Aula', description='Serbaguna')])

    def test_unreadable_slot_falls_back_to_seed(self):
        mirror = DataMirror(MemorySideStore({'activities': '{not json'}), notify=self.record)
        self.assertEqual(len(mirror.activities), len(SEEDS['activities']))

    def test_slot_with_wrong_shape_falls_back_to_seed(self):
        for payload in ('[1, 2]', '"abc"', '{"id": "x"}', '[{"id": "x"}]', 'null'):
            mirror = DataMirror(MemorySideStore({'facilities': payload}), notify=self.record)
            self.assertEqual(len(mirror.facilities), len(SEEDS['facilities']), payload)

    def test_add_assigns_fresh_id_and_keeps_fields(self):
        existing_ids = {m.id for m in self.mirror.leadership}
        member = self.mirror.add_leadership_member(
            name='Ahmad', position='Sekretaris', education='S1 Hukum', image_url='/media/photos/a.png')

        matches = [m for m in self.mirror.leadership if m.id == member.id]
        self.assertEqual(len(matches), 1)
        self.assertNotIn(member.id, existing_ids)
        self.assertEqual(matches[0], LeadershipMember(
            id=member.id, name='Ahmad', position='Sekretaris',
            education='S1 Hukum', image_url='/media/photos/a.png'))
        self.assertEqual(self.mirror.leadership[-1].id, member.id)
        self.assertEqual(self.notifications[-1][0], 'success')

    def test_ids_are_never_reused(self):
        first = self.mirror.add_facility(name='Parkir')
        self.mirror.delete_facility(first.id)
        second = self.mirror.add_facility(name='Parkir')
        self.assertNotEqual(first.id, second.id)

    def test_delete_twice_is_idempotent(self):
        facility = self.mirror.add_facility(name='Parkir')
        self.mirror.delete_facility(facility.id)
        after_first = self.mirror.serialize('facilities')
        self.mirror.delete_facility(facility.id)
        self.assertEqual(self.mirror.serialize('facilities'), after_first)
        self.assertNotIn('error', [c for c, _ in self.notifications])

    def test_update_unknown_id_leaves_collection_unchanged(self):
        before = self.mirror.serialize('activities')
        result = self.mirror.update_activity(Activity(id='missing', date='2026-01-01', name='X'))
        self.assertIsNone(result)
        self.assertEqual(self.mirror.serialize('activities'), before)
        self.assertEqual(self.notifications[-1][0], 'warning')
        # the slot is still rewritten
        self.assertEqual(self.store.writes[-1], 'activities')

    def test_update_replaces_in_place(self):
        target = self.mirror.activities[1]
        target.name = 'Kajian Fiqih'
        self.mirror.update_activity(target)
        self.assertEqual(self.mirror.activities[1].name, 'Kajian Fiqih')
        self.assertEqual(len(self.mirror.activities), len(SEEDS['activities']))

    def test_reads_return_copies(self):
        self.mirror.leadership[0].name = 'Diubah dari luar'
        self.assertNotEqual(self.mirror.leadership[0].name, 'Diubah dari luar')

    def test_every_mutation_rewrites_its_slot(self):
        video = self.mirror.add_video(name='Khutbah', video_url='/media/videos/k.mp4')
        video.description = 'Khutbah Idul Fitri'
        self.mirror.update_video(video)
        self.mirror.delete_video(video.id)
        self.assertEqual(self.store.writes, ['videos', 'videos', 'videos'])
        self.assertEqual(json.loads(self.store.get('videos')), [])

    def test_round_trip_through_side_store(self):
        self.mirror.add_photo(name='Buka Puasa', image_url='/media/photos/b.jpg', category='Events')
        self.mirror.add_message(name='Jane', email='jane@x.com', subject='general', message='Halo')
        fresh = DataMirror(self.store, notify=self.record)
        for slot in COLLECTIONS:
            if self.store.get(slot) is not None:
                self.assertEqual(fresh.all(slot), self.mirror.all(slot))
        self.assertEqual(fresh.photos, self.mirror.photos)
        self.assertEqual(fresh.messages, self.mirror.messages)

    def test_add_message_stamps_date_and_forces_unread(self):
        start = datetime.now(timezone.utc)
        message = self.mirror.add_message(
            name='Jane', email='jane@x.com', subject='general', message='Hello there, need info')
        end = datetime.now(timezone.utc)

        self.assertFalse(message.is_read)
        self.assertTrue(start <= datetime.fromisoformat(message.date) <= end)
        self.assertEqual(self.notifications[-1], ('success', 'Pesan berhasil dikirim.'))

    def test_read_status_changes_only_the_flag_and_is_silent(self):
        message = self.mirror.add_message(name='Jane', email='jane@x.com', subject='general', message='Halo')
        notified = len(self.notifications)
        self.mirror.update_message_read_status(message.id, True)

        stored = self.mirror.get('messages', message.id)
        self.assertTrue(stored.is_read)
        message.is_read = True
        self.assertEqual(stored, message)
        self.assertEqual(len(self.notifications), notified)
        self.assertEqual(self.mirror.unread_messages(), [])

    def test_side_store_failure_is_swallowed(self):
        mirror = DataMirror(BrokenSideStore(), notify=self.record)
        facility = mirror.add_facility(name='Aula')
        self.assertIsNotNone(facility)
        self.assertIn(facility.id, [f.id for f in mirror.facilities])

    def test_unknown_activity_category_is_reported_not_raised(self):
        before = self.mirror.serialize('activities')
        result = self.mirror.add_activity(date='2026-01-01', name='Lomba', category='sports')
        self.assertIsNone(result)
        self.assertEqual(self.notifications[-1], ('error', 'Gagal menambahkan kegiatan.'))
        self.assertEqual(self.mirror.serialize('activities'), before)

    def test_unknown_photo_category_is_reported_not_raised(self):
        before = self.mirror.serialize('photos')
        self.assertIsNone(self.mirror.add_photo(name='Lomba', image_url='/a.jpg', category='Sports'))
        self.assertEqual(self.notifications[-1], ('error', 'Gagal menambahkan foto.'))
        photo = self.mirror.photos[0]
        photo.category = ''
        self.assertIsNone(self.mirror.update_photo(photo))
        self.assertEqual(self.notifications[-1], ('error', 'Gagal memperbarui foto.'))
        self.assertEqual(self.mirror.serialize('photos'), before)

    def test_wrong_record_type_is_reported(self):
        self.mirror.update_facility(LeadershipMember(id='x', name='A', position='B'))
        self.assertEqual(self.notifications[-1][0], 'error')

    def test_activity_filters(self):
        self.mirror.add_activity(date='2026-12-01', name='Santunan Anak Yatim', category='community')
        self.assertEqual([a.name for a in self.mirror.activities_by_category('community')],
                         ['Santunan Anak Yatim'])
        self.assertEqual([a.name for a in self.mirror.search_activities('TAFSIR')],
                         ['Kajian Tafsir Al-Quran'])

    def test_message_search(self):
        self.mirror.add_message(name='Budi', email='budi@x.com', subject='donation', message='Infaq Ramadhan')
        read = self.mirror.add_message(name='Siti', email='siti@x.com', subject='general', message='Jadwal kajian')
        self.mirror.update_message_read_status(read.id, True)

        self.assertEqual([m.name for m in self.mirror.search_messages('ramadhan')], ['Budi'])
        self.assertEqual([m.name for m in self.mirror.search_messages('SITI@')], ['Siti'])
        self.assertEqual([m.name for m in self.mirror.search_messages('DONATION')], ['Budi'])
        self.assertEqual(len(self.mirror.search_messages('')), 2)
        self.assertEqual(self.mirror.search_messages('kajian', unread_only=True), [])
        self.assertEqual([m.name for m in self.mirror.search_messages('', unread_only=True)], ['Budi'])

    def test_counts(self):
        self.mirror.add_message(name='A', email='a@x.com', subject='other', message='1')
        read = self.mirror.add_message(name='B', email='b@x.com', subject='other', message='2')
        self.mirror.update_message_read_status(read.id, True)
        counts = self.mirror.counts()
        self.assertEqual(counts['messages'], 2)
        self.assertEqual(counts['unread_messages'], 1)
        self.assertEqual(counts['leadership'], len(SEEDS['leadership']))


if __name__ == '__main__':
    unittest.main()
