import logging
import os
import uuid
from dataclasses import dataclass
from typing import Optional

from .errors import (
    BlobStoreError, BucketMissing, MissingFile, OversizeFile, PermissionDenied,
    ResourceNotFound, StorageUnavailable, UnsupportedType, UploadError,
)

logger = logging.getLogger(__name__)

MB = 1024 * 1024
VIDEO_BUCKET = 'videos'
VIDEO_MAX_SIZE = 500 * MB
DEFAULT_MAX_SIZE = 5 * MB
VIDEO_MIME_TYPES = {'video/mp4', 'video/webm', 'video/ogg', 'video/quicktime'}
CACHE_CONTROL = '3600'


@dataclass
class UploadResult:
    url: Optional[str] = None
    reason: Optional[str] = None
    error: Optional[UploadError] = None

    def __bool__(self):
        return self.url is not None


def max_size_for(bucket):
    return VIDEO_MAX_SIZE if bucket == VIDEO_BUCKET else DEFAULT_MAX_SIZE


def file_size(file):
    size = getattr(file, 'size', None)
    if size is not None:
        return size
    stream = getattr(file, 'stream', file)
    pos = stream.tell()
    stream.seek(0, os.SEEK_END)
    size = stream.tell()
    stream.seek(pos)
    return size


def file_extension(filename):
    _, ext = os.path.splitext(filename or '')
    return ext.lower()


def storage_key(filename):
    return uuid.uuid4().hex + file_extension(filename)


def classify_store_error(exc):
    text = str(exc).lower()
    if 'row-level security' in text or 'permission' in text or getattr(exc, 'status', None) in (401, 403):
        return PermissionDenied()
    if 'not found' in text or 'does not exist' in text:
        return ResourceNotFound(f'Sumber penyimpanan tidak ditemukan: {exc}')
    return StorageUnavailable(f'Upload gagal: {exc}')


class UploadGatekeeper:
    """Checks a file against its bucket's policy and sends it to the blob store.

    Size is checked first, then the MIME type, and only then is the store
    contacted, so a refused file never causes network traffic.
    """

    def __init__(self, store):
        self.store = store
        self.in_progress = False

    def check(self, file, bucket):
        if file is None or not getattr(file, 'filename', None):
            raise MissingFile()
        limit = max_size_for(bucket)
        if file_size(file) > limit:
            raise OversizeFile(f'Ukuran file melebihi batas {limit // MB} MB untuk bucket {bucket}.')
        content_type = getattr(file, 'mimetype', None) or getattr(file, 'content_type', None) or ''
        if bucket == VIDEO_BUCKET and content_type not in VIDEO_MIME_TYPES:
            raise UnsupportedType('Format video harus MP4, WebM, OGG atau QuickTime.')
        return content_type

    def ensure_bucket(self, bucket):
        try:
            buckets = self.store.list_buckets()
        except Exception as e:
            logger.error('Listing buckets failed: %s', e)
            raise StorageUnavailable() from e
        if bucket not in buckets:
            raise BucketMissing(f"Bucket penyimpanan '{bucket}' belum dibuat.")

    def transfer(self, file, bucket, content_type):
        key = storage_key(file.filename)
        data = file.read()
        try:
            self.store.put(bucket, key, data, content_type=content_type,
                           upsert=True, cache_control=CACHE_CONTROL)
        except BlobStoreError as e:
            raise classify_store_error(e) from e
        return self.store.public_url(bucket, key)

    def upload(self, file, bucket='uploads'):
        try:
            content_type = self.check(file, bucket)
            self.in_progress = True
            try:
                self.ensure_bucket(bucket)
                url = self.transfer(file, bucket, content_type)
            finally:
                self.in_progress = False
        except UploadError as e:
            logger.warning('Upload to %s refused: %s', bucket, e)
            return UploadResult(reason=e.reason, error=e)
        except Exception:
            logger.exception('Unexpected error while uploading to %s', bucket)
            error = StorageUnavailable('Upload gagal karena kesalahan tak terduga.')
            return UploadResult(reason=error.reason, error=error)
        logger.info('Uploaded %s to %s', url, bucket)
        return UploadResult(url=url)
