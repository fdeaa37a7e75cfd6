import logging
import os

import requests
from werkzeug.security import safe_join

from .errors import BlobStoreError

logger = logging.getLogger(__name__)


class BlobStore:
    """Named buckets of files reachable through a public URL."""

    def list_buckets(self):
        raise NotImplementedError

    def put(self, bucket, key, data, content_type=None, upsert=True, cache_control='3600'):
        raise NotImplementedError

    def public_url(self, bucket, key):
        raise NotImplementedError


class LocalBlobStore(BlobStore):
    """Buckets are sub-folders of the upload folder, served by ``/media/<bucket>/<key>``."""

    def __init__(self, root, base_url='/media'):
        self.root = root
        self.base_url = base_url.rstrip('/')
        os.makedirs(self.root, exist_ok=True)

    def create_bucket(self, bucket):
        os.makedirs(os.path.join(self.root, bucket), exist_ok=True)

    def list_buckets(self):
        return sorted(name for name in os.listdir(self.root)
                      if os.path.isdir(os.path.join(self.root, name)))

    def bucket_path(self, bucket):
        path = safe_join(self.root, bucket)
        if path is None or not os.path.isdir(path):
            raise BlobStoreError(f"Bucket '{bucket}' does not exist", status=404)
        return path

    def put(self, bucket, key, data, content_type=None, upsert=True, cache_control='3600'):
        path = safe_join(self.bucket_path(bucket), key)
        if path is None:
            raise BlobStoreError(f'Invalid object key: {key}', status=400)
        if not upsert and os.path.exists(path):
            raise BlobStoreError(f'Object {bucket}/{key} already exists', status=409)
        with open(path, 'wb') as f:
            f.write(data)
        logger.info('Stored %s/%s (%d bytes)', bucket, key, len(data))
        return key

    def public_url(self, bucket, key):
        return f'{self.base_url}/{bucket}/{key}'


class SupabaseBlobStore(BlobStore):
    """Storage REST API of a hosted Supabase project."""

    def __init__(self, url, key, session=None, timeout=10):
        self.url = url.rstrip('/')
        self.key = key
        self.session = session or requests.Session()
        self.timeout = timeout

    def _headers(self, **extra):
        headers = {'apikey': self.key, 'Authorization': f'Bearer {self.key}'}
        headers.update(extra)
        return headers

    @staticmethod
    def _raise_for(response):
        if response.ok:
            return
        try:
            body = response.json()
            message = body.get('message') or body.get('error') or response.text
        except ValueError:
            message = response.text
        raise BlobStoreError(message or f'HTTP {response.status_code}', status=response.status_code)

    def list_buckets(self):
        r = self.session.get(f'{self.url}/storage/v1/bucket', headers=self._headers(), timeout=self.timeout)
        self._raise_for(r)
        return [bucket['name'] for bucket in r.json()]

    def put(self, bucket, key, data, content_type=None, upsert=True, cache_control='3600'):
        headers = self._headers(**{
            'Content-Type': content_type or 'application/octet-stream',
            'cache-control': f'max-age={cache_control}',
            'x-upsert': 'true' if upsert else 'false',
        })
        r = self.session.post(f'{self.url}/storage/v1/object/{bucket}/{key}',
                              data=data, headers=headers, timeout=self.timeout)
        self._raise_for(r)
        return key

    def public_url(self, bucket, key):
        return f'{self.url}/storage/v1/object/public/{bucket}/{key}'
