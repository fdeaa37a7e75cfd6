class UploadError(Exception):
    """Base class for every reason an upload can be refused."""

    message = 'Upload gagal.'

    def __init__(self, message=None):
        super().__init__(message or self.message)

    @property
    def reason(self):
        return str(self)


class MissingFile(UploadError):
    message = 'Tidak ada file dipilih.'


class OversizeFile(UploadError):
    message = 'Ukuran file melebihi batas.'


class UnsupportedType(UploadError):
    message = 'Format file tidak diizinkan.'


class StorageUnavailable(UploadError):
    message = 'Penyimpanan tidak dapat diakses.'


class BucketMissing(UploadError):
    message = 'Bucket penyimpanan tidak ditemukan.'


class PermissionDenied(UploadError):
    message = 'Akses ditolak: tidak punya izin mengunggah file.'


class ResourceNotFound(UploadError):
    message = 'Sumber penyimpanan tidak ditemukan.'


class BlobStoreError(Exception):
    """Raised by a blob store when the backend rejects a request."""

    def __init__(self, message, status=None):
        super().__init__(message)
        self.status = status


class InvalidCredentials(Exception):
    """Username or password did not match an admin account."""


class RegistrationInvalid(ValueError):
    """Registration form failed validation; ``errors`` maps field to message."""

    def __init__(self, errors):
        super().__init__('; '.join(f'{k}: {v}' for k, v in errors.items()))
        self.errors = errors
