import functools
import logging
from dataclasses import dataclass, asdict

from flask import flash, redirect, session, url_for
from werkzeug.security import check_password_hash

from .errors import InvalidCredentials
from .extensions import db
from .models import AdminUser

logger = logging.getLogger(__name__)

SESSION_KEY = 'admin_user'


@dataclass
class AdminIdentity:
    username: str
    role: str = 'admin'


class CredentialVerifier:
    """``verify(username, password)`` returns an AdminIdentity or raises InvalidCredentials."""

    def verify(self, username, password):
        raise NotImplementedError


class StaticCredentialVerifier(CredentialVerifier):
    def __init__(self, username, password_hash):
        self.username = username
        self.password_hash = password_hash

    def verify(self, username, password):
        if username == self.username and check_password_hash(self.password_hash, password or ''):
            return AdminIdentity(username=username)
        raise InvalidCredentials(username)


class AdminTableVerifier(CredentialVerifier):
    """Looks the user up in the ``admin_users`` table."""

    def verify(self, username, password):
        user = db.session.execute(
            db.select(AdminUser).filter_by(username=username)).scalar_one_or_none()
        if user is not None and check_password_hash(user.password_hash, password or ''):
            return AdminIdentity(username=user.username)
        raise InvalidCredentials(username)


class ChainedVerifier(CredentialVerifier):
    """Accepts the first verifier that recognises the credentials."""

    def __init__(self, *verifiers):
        self.verifiers = verifiers

    def verify(self, username, password):
        for verifier in self.verifiers:
            try:
                return verifier.verify(username, password)
            except InvalidCredentials:
                continue
        raise InvalidCredentials(username)


# --- Session helpers ---

def login_user(identity):
    session[SESSION_KEY] = asdict(identity)
    session.permanent = True
    logger.info('Admin %s logged in', identity.username)


def logout_user():
    user = session.pop(SESSION_KEY, None)
    if user:
        logger.info('Admin %s logged out', user.get('username'))


def current_admin():
    data = session.get(SESSION_KEY)
    return AdminIdentity(**data) if data else None


def admin_required(f):
    """Decorator to require admin rights"""
    @functools.wraps(f)
    def decorated_function(*args, **kwargs):
        if current_admin() is None:
            flash('Silakan login sebagai admin terlebih dahulu.', 'error')
            return redirect(url_for('admin.login'))
        return f(*args, **kwargs)
    return decorated_function
