import os
import tempfile
import unittest
from unittest import mock

from masjid_site.blob_store import LocalBlobStore, SupabaseBlobStore
from masjid_site.errors import BlobStoreError


def response(status=200, json_body=None, text=''):
    r = mock.Mock()
    r.status_code = status
    r.ok = 200 <= status < 300
    r.text = text
    if json_body is None:
        r.json.side_effect = ValueError('no json')
    else:
        r.json.return_value = json_body
    return r


class SupabaseBlobStoreTests(unittest.TestCase):
    def setUp(self):
        self.session = mock.Mock()
        self.store = SupabaseBlobStore('https://project.supabase.co/', 'anon-key', session=self.session)

    def test_list_buckets(self):
        self.session.get.return_value = response(json_body=[{'name': 'photos'}, {'name': 'videos'}])
        self.assertEqual(self.store.list_buckets(), ['photos', 'videos'])
        url = self.session.get.call_args[0][0]
        self.assertEqual(url, 'https://project.supabase.co/storage/v1/bucket')
        headers = self.session.get.call_args[1]['headers']
        self.assertEqual(headers['Authorization'], 'Bearer anon-key')

    def test_put_sends_upsert_and_cache_headers(self):
        self.session.post.return_value = response(json_body={'Key': 'photos/abc.png'})
        self.store.put('photos', 'abc.png', b'data', content_type='image/png')

        url = self.session.post.call_args[0][0]
        kwargs = self.session.post.call_args[1]
        self.assertEqual(url, 'https://project.supabase.co/storage/v1/object/photos/abc.png')
        self.assertEqual(kwargs['data'], b'data')
        self.assertEqual(kwargs['headers']['x-upsert'], 'true')
        self.assertEqual(kwargs['headers']['cache-control'], 'max-age=3600')
        self.assertEqual(kwargs['headers']['Content-Type'], 'image/png')

    def test_error_message_is_carried(self):
        self.session.post.return_value = response(
            status=403, json_body={'message': 'new row violates row-level security policy'})
        with self.assertRaises(BlobStoreError) as ctx:
            self.store.put('photos', 'abc.png', b'data')
        self.assertIn('row-level security', str(ctx.exception))
        self.assertEqual(ctx.exception.status, 403)

    def test_error_without_json_body(self):
        self.session.get.return_value = response(status=502, text='Bad Gateway')
        with self.assertRaises(BlobStoreError) as ctx:
            self.store.list_buckets()
        self.assertEqual(str(ctx.exception), 'Bad Gateway')

    def test_public_url(self):
        self.assertEqual(self.store.public_url('videos', 'k.mp4'),
                         'https://project.supabase.co/storage/v1/object/public/videos/k.mp4')


class LocalBlobStoreTests(unittest.TestCase):
    def setUp(self):
        self.tmp = tempfile.TemporaryDirectory()
        self.store = LocalBlobStore(self.tmp.name, base_url='/media/')

    def tearDown(self):
        self.tmp.cleanup()

    def test_buckets_are_directories(self):
        self.assertEqual(self.store.list_buckets(), [])
        self.store.create_bucket('videos')
        self.store.create_bucket('photos')
        self.assertEqual(self.store.list_buckets(), ['photos', 'videos'])

    def test_put_overwrites_when_upsert(self):
        self.store.create_bucket('photos')
        self.store.put('photos', 'a.png', b'one')
        self.store.put('photos', 'a.png', b'two')
        with open(os.path.join(self.tmp.name, 'photos', 'a.png'), 'rb') as f:
            self.assertEqual(f.read(), b'two')
        with self.assertRaises(BlobStoreError):
            self.store.put('photos', 'a.png', b'three', upsert=False)

    def test_put_into_missing_bucket(self):
        with self.assertRaises(BlobStoreError) as ctx:
            self.store.put('photos', 'a.png', b'data')
        self.assertIn('does not exist', str(ctx.exception))

    def test_key_cannot_escape_bucket(self):
        self.store.create_bucket('photos')
        with self.assertRaises(BlobStoreError):
            self.store.put('photos', '../escape.png', b'data')

    def test_public_url(self):
        self.assertEqual(self.store.public_url('photos', 'a.png'), '/media/photos/a.png')


if __name__ == '__main__':
    unittest.main()
