import os
import secrets
import tempfile
from datetime import timedelta

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))


class Config:
    """Settings read from the environment, with development defaults."""

    SECRET_KEY = os.environ.get('SECRET_KEY') or secrets.token_urlsafe(32)
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL') or 'sqlite:///' + os.path.join(BASE_DIR, 'masjid.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    PERMANENT_SESSION_LIFETIME = timedelta(hours=8)
    WTF_CSRF_ENABLED = True

    # Large enough for the 500 MB video limit; per-bucket limits live in uploads.py
    MAX_CONTENT_LENGTH = 510 * 1024 * 1024
    UPLOAD_FOLDER = os.environ.get('UPLOAD_FOLDER') or os.path.join(BASE_DIR, 'uploads')
    STORAGE_BUCKETS = ('photos', 'videos', 'uploads')

    # 'local' keeps files in UPLOAD_FOLDER, 'supabase' sends them to SUPABASE_URL
    BLOB_BACKEND = os.environ.get('BLOB_BACKEND', 'local')
    # 'sql' keeps mirror slots in the database, 'memory' forgets them on restart
    SIDE_STORE = os.environ.get('SIDE_STORE', 'sql')
    SUPABASE_URL = os.environ.get('SUPABASE_URL')
    SUPABASE_KEY = os.environ.get('SUPABASE_KEY')

    ADMIN_USERNAME = os.environ.get('ADMIN_USERNAME')
    ADMIN_PASSWORD_HASH = os.environ.get('ADMIN_PASSWORD_HASH')

    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO')


class TestingConfig(Config):
    TESTING = True
    WTF_CSRF_ENABLED = False
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    SECRET_KEY = 'test-secret'
    SIDE_STORE = 'memory'
    UPLOAD_FOLDER = os.path.join(tempfile.gettempdir(), 'masjid-site-test-uploads')
    LOG_LEVEL = 'WARNING'
