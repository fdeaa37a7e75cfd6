import io
import os
import tempfile
import unittest

from werkzeug.datastructures import FileStorage

from masjid_site.blob_store import BlobStore, LocalBlobStore
from masjid_site.errors import (
    BlobStoreError, BucketMissing, MissingFile, OversizeFile, PermissionDenied,
    ResourceNotFound, StorageUnavailable, UnsupportedType,
)
from masjid_site.uploads import MB, UploadGatekeeper

DATA = b'\x89PNG fake image bytes'


class FakeFile:
    """Upload stand-in that reports a size without holding the bytes."""

    def __init__(self, filename, mimetype, size):
        self.filename = filename
        self.mimetype = mimetype
        self.size = size
        self.reads = 0

    def read(self):
        self.reads += 1
        return DATA


class FakeStore(BlobStore):
    def __init__(self, buckets=('photos', 'videos', 'uploads'), list_error=None, put_error=None):
        self.buckets = list(buckets)
        self.list_error = list_error
        self.put_error = put_error
        self.calls = []
        self.in_progress_during_put = None
        self.gatekeeper = None

    def list_buckets(self):
        self.calls.append('list_buckets')
        if self.list_error:
            raise self.list_error
        return self.buckets

    def put(self, bucket, key, data, content_type=None, upsert=True, cache_control='3600'):
        self.calls.append(('put', bucket, key, content_type, upsert, cache_control))
        if self.gatekeeper is not None:
            self.in_progress_during_put = self.gatekeeper.in_progress
        if self.put_error:
            raise self.put_error
        return key

    def public_url(self, bucket, key):
        return f'https://cdn.example.org/{bucket}/{key}'


class UploadGatekeeperTests(unittest.TestCase):
    def setUp(self):
        self.store = FakeStore()
        self.gatekeeper = UploadGatekeeper(self.store)
        self.store.gatekeeper = self.gatekeeper

    def test_oversize_video_fails_without_network(self):
        result = self.gatekeeper.upload(FakeFile('khutbah.mp4', 'video/mp4', 600 * MB), 'videos')
        self.assertFalse(result)
        self.assertIsNone(result.url)
        self.assertIsInstance(result.error, OversizeFile)
        self.assertEqual(self.store.calls, [])

    def test_size_is_checked_before_type(self):
        result = self.gatekeeper.upload(FakeFile('poster.png', 'image/png', 600 * MB), 'videos')
        self.assertIsInstance(result.error, OversizeFile)

    def test_video_bucket_rejects_images(self):
        result = self.gatekeeper.upload(FakeFile('poster.png', 'image/png', 10 * MB), 'videos')
        self.assertIsInstance(result.error, UnsupportedType)
        self.assertTrue(result.reason)
        self.assertEqual(self.store.calls, [])

    def test_video_bucket_accepts_allowed_types(self):
        for mimetype in ('video/mp4', 'video/webm', 'video/ogg', 'video/quicktime'):
            result = self.gatekeeper.upload(FakeFile('clip.bin', mimetype, 100 * MB), 'videos')
            self.assertTrue(result, mimetype)

    def test_photo_upload_returns_public_url(self):
        upload = FakeFile('Foto Kegiatan.PNG', 'image/png', 3 * MB)
        result = self.gatekeeper.upload(upload, 'photos')

        self.assertTrue(result)
        self.assertIsNotNone(result.url)
        self.assertNotEqual(result.url, upload.filename)
        self.assertNotIn('Foto', result.url)
        self.assertTrue(result.url.endswith('.png'))
        self.assertEqual(self.store.calls[0], 'list_buckets')
        _, bucket, key, content_type, upsert, cache_control = self.store.calls[1]
        self.assertEqual((bucket, content_type, upsert, cache_control), ('photos', 'image/png', True, '3600'))
        self.assertEqual(result.url, f'https://cdn.example.org/photos/{key}')

    def test_keys_do_not_collide(self):
        first = self.gatekeeper.upload(FakeFile('a.jpg', 'image/jpeg', MB), 'photos')
        second = self.gatekeeper.upload(FakeFile('a.jpg', 'image/jpeg', MB), 'photos')
        self.assertNotEqual(first.url, second.url)

    def test_default_bucket_limit_is_five_megabytes(self):
        result = self.gatekeeper.upload(FakeFile('doc.pdf', 'application/pdf', 6 * MB))
        self.assertIsInstance(result.error, OversizeFile)
        ok = self.gatekeeper.upload(FakeFile('doc.pdf', 'application/pdf', 5 * MB))
        self.assertTrue(ok)
        self.assertIn('/uploads/', ok.url)

    def test_missing_file(self):
        self.assertIsInstance(self.gatekeeper.upload(None).error, MissingFile)
        self.assertIsInstance(self.gatekeeper.upload(FakeFile('', 'image/png', 1)).error, MissingFile)

    def test_listing_failure_skips_transfer(self):
        self.store.list_error = BlobStoreError('connection refused')
        result = self.gatekeeper.upload(FakeFile('a.png', 'image/png', MB), 'photos')
        self.assertIsInstance(result.error, StorageUnavailable)
        self.assertEqual(self.store.calls, ['list_buckets'])

    def test_missing_bucket_skips_transfer(self):
        self.store.buckets = ['uploads']
        upload = FakeFile('a.png', 'image/png', MB)
        result = self.gatekeeper.upload(upload, 'photos')
        self.assertIsInstance(result.error, BucketMissing)
        self.assertEqual(self.store.calls, ['list_buckets'])
        self.assertEqual(upload.reads, 0)

    def test_store_errors_are_classified(self):
        cases = [
            (BlobStoreError('new row violates row-level security policy', status=400), PermissionDenied),
            (BlobStoreError('Object not found', status=404), ResourceNotFound),
            (BlobStoreError('Internal error', status=500), StorageUnavailable),
        ]
        for error, expected in cases:
            self.store.put_error = error
            result = self.gatekeeper.upload(FakeFile('a.png', 'image/png', MB), 'photos')
            self.assertIsInstance(result.error, expected, str(error))
            self.assertIsNone(result.url)

    def test_unexpected_errors_become_failures(self):
        self.store.put_error = RuntimeError('boom')
        result = self.gatekeeper.upload(FakeFile('a.png', 'image/png', MB), 'photos')
        self.assertIsInstance(result.error, StorageUnavailable)
        self.assertFalse(self.gatekeeper.in_progress)

    def test_in_progress_flag(self):
        self.gatekeeper.upload(FakeFile('a.png', 'image/png', MB), 'photos')
        self.assertTrue(self.store.in_progress_during_put)
        self.assertFalse(self.gatekeeper.in_progress)


class LocalUploadTests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.store = LocalBlobStore(self.tmp.name)
        self.store.create_bucket('photos')
        self.gatekeeper = UploadGatekeeper(self.store)

    def tearDown(self):
        self.tmp.cleanup()

    def test_file_storage_is_written_to_bucket(self):
        upload = FileStorage(stream=io.BytesIO(DATA), filename='masjid.jpg', content_type='image/jpeg')
        result = self.gatekeeper.upload(upload, 'photos')

        self.assertTrue(result)
        self.assertTrue(result.url.startswith('/media/photos/'))
        key = result.url.rsplit('/', 1)[1]
        with open(os.path.join(self.tmp.name, 'photos', key), 'rb') as f:
            self.assertEqual(f.read(), DATA)

    def test_oversize_file_storage_is_refused(self):
        upload = FileStorage(stream=io.BytesIO(b'0' * (5 * MB + 1)), filename='big.jpg', content_type='image/jpeg')
        result = self.gatekeeper.upload(upload, 'photos')
        self.assertIsInstance(result.error, OversizeFile)
        self.assertEqual(os.listdir(os.path.join(self.tmp.name, 'photos')), [])


if __name__ == '__main__':
    unittest.main()
