"""Flask application factory and the public pages of the site."""
import logging
import os

from flask import (
    Blueprint, Flask, abort, current_app, flash, has_request_context, redirect,
    request, send_from_directory, url_for,
)

from .auth import AdminTableVerifier, ChainedVerifier, StaticCredentialVerifier
from .blob_store import LocalBlobStore, SupabaseBlobStore
from .config import Config
from .entities import ACTIVITY_CATEGORIES
from .errors import RegistrationInvalid
from .extensions import csrf, db
from .forms import ContactForm, RegistrationForm
from .layout import FORM_FIELDS, render_page
from .mirror import DataMirror
from .registrations import RegistrationBook
from .side_store import MemorySideStore, SqlSideStore
from .uploads import UploadGatekeeper

logger = logging.getLogger(__name__)

site = Blueprint('site', __name__)


class Services:
    """Per-application objects shared by every request."""

    def __init__(self, mirror, gatekeeper, registrations, verifier, blob_store):
        self.mirror = mirror
        self.gatekeeper = gatekeeper
        self.registrations = registrations
        self.verifier = verifier
        self.blob_store = blob_store


def services():
    return current_app.extensions['masjid']


def flash_notify(message, category='info'):
    if has_request_context():
        flash(message, category)
    else:
        logger.info('[%s] %s', category, message)


# --- App setup ---

def configure_logging(app):
    level = getattr(logging, str(app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO)
    logging.basicConfig(
        format='%(asctime)s %(name)-24s %(levelname)-8s %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S')
    logging.getLogger('masjid_site').setLevel(level)
    app.logger.setLevel(level)


def build_blob_store(app):
    if app.config['BLOB_BACKEND'] == 'supabase':
        if not app.config.get('SUPABASE_URL') or not app.config.get('SUPABASE_KEY'):
            raise RuntimeError('BLOB_BACKEND=supabase needs SUPABASE_URL and SUPABASE_KEY')
        return SupabaseBlobStore(app.config['SUPABASE_URL'], app.config['SUPABASE_KEY'])
    store = LocalBlobStore(app.config['UPLOAD_FOLDER'])
    for bucket in app.config['STORAGE_BUCKETS']:
        store.create_bucket(bucket)
    return store


def build_verifier(app):
    verifiers = []
    if app.config.get('ADMIN_USERNAME') and app.config.get('ADMIN_PASSWORD_HASH'):
        verifiers.append(StaticCredentialVerifier(app.config['ADMIN_USERNAME'], app.config['ADMIN_PASSWORD_HASH']))
    verifiers.append(AdminTableVerifier())
    return ChainedVerifier(*verifiers)


def create_app(overrides=None, side_store=None, blob_store=None, verifier=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if overrides is not None:
        if isinstance(overrides, dict):
            app.config.update(overrides)
        else:
            app.config.from_object(overrides)

    configure_logging(app)
    db.init_app(app)
    csrf.init_app(app)
    with app.app_context():
        db.create_all()

    if side_store is None:
        side_store = MemorySideStore() if app.config['SIDE_STORE'] == 'memory' else SqlSideStore(app)
    if blob_store is None:
        blob_store = build_blob_store(app)

    app.extensions['masjid'] = Services(
        mirror=DataMirror(side_store, notify=flash_notify),
        gatekeeper=UploadGatekeeper(blob_store),
        registrations=RegistrationBook(),
        verifier=verifier or build_verifier(app),
        blob_store=blob_store,
    )

    from .admin import admin
    app.register_blueprint(site)
    app.register_blueprint(admin, url_prefix='/admin')
    app.after_request(add_security_headers)
    app.logger.info('Masjid site ready (blob backend: %s)', app.config['BLOB_BACKEND'])
    return app


def add_security_headers(response):
    response.headers['X-Content-Type-Options'] = 'nosniff'
    response.headers['X-Frame-Options'] = 'SAMEORIGIN'
    response.headers['X-XSS-Protection'] = '1; mode=block'
    return response


# --- Public pages ---

HOME_HTML = """
<section class="text-center py-10">
    <h1 class="text-3xl font-bold text-emerald-700 mb-2">Selamat Datang di Masjid Al-Hijrah</h1>
    <p class="text-gray-500">Pusat ibadah, pendidikan dan kegiatan umat.</p>
</section>
<h3 class="text-xl font-bold mb-4">Kegiatan Terdekat</h3>
<div class="grid md:grid-cols-3 gap-4">
    {% for item in activities %}
    <div class="bg-white p-5 rounded-3xl shadow-sm border border-gray-100">
        <span class="text-xs text-gray-400">{{ item.date }}</span>
        <h4 class="font-bold">{{ item.name }}</h4>
        <p class="text-sm text-gray-500">{{ item.description }}</p>
    </div>
    {% else %}
    <p class="text-gray-400">Belum ada kegiatan.</p>
    {% endfor %}
</div>
"""

PROFILE_HTML = """
<h3 class="text-xl font-bold mb-4">Struktur Pengurus</h3>
<div class="grid md:grid-cols-3 gap-4">
    {% for member in leadership %}
    <div class="bg-white p-5 rounded-3xl shadow-sm border border-gray-100 text-center">
        {% if member.image_url %}<img src="{{ member.image_url }}" alt="{{ member.name }}" class="w-24 h-24 rounded-full mx-auto object-cover mb-3">{% endif %}
        <h4 class="font-bold">{{ member.name }}</h4>
        <p class="text-emerald-600 text-sm">{{ member.position }}</p>
        <p class="text-gray-400 text-xs">{{ member.education }}</p>
    </div>
    {% endfor %}
</div>
"""

FACILITIES_HTML = """
<h3 class="text-xl font-bold mb-4">Fasilitas</h3>
<div class="grid md:grid-cols-2 gap-4">
    {% for item in facilities %}
    <div class="bg-white rounded-3xl shadow-sm border border-gray-100 overflow-hidden">
        {% if item.image_url %}<img src="{{ item.image_url }}" alt="{{ item.name }}" class="w-full h-40 object-cover">{% endif %}
        <div class="p-5"><h4 class="font-bold">{{ item.name }}</h4><p class="text-sm text-gray-500">{{ item.description }}</p></div>
    </div>
    {% endfor %}
</div>
"""

ACTIVITIES_HTML = """
<h3 class="text-xl font-bold mb-4">Kegiatan</h3>
<form method="GET" class="flex gap-2 mb-6">
    <input type="text" name="q" value="{{ q or '' }}" placeholder="Cari kegiatan..." class="flex-1 border rounded-xl p-2 text-sm">
    <select name="category" class="border rounded-xl p-2 text-sm">
        <option value="">Semua</option>
        {% for c in categories %}<option value="{{ c }}" {{ 'selected' if c == category }}>{{ c }}</option>{% endfor %}
    </select>
    <button class="bg-emerald-500 text-white px-4 rounded-xl text-sm">Filter</button>
</form>
<div class="space-y-3">
    {% for item in activities %}
    <div class="bg-white p-5 rounded-3xl shadow-sm border border-gray-100 flex justify-between items-center">
        <div>
            <span class="text-[10px] font-bold px-2 py-0.5 rounded-full bg-emerald-100 text-emerald-600">{{ item.category }}</span>
            <span class="text-xs text-gray-400">{{ item.date }}</span>
            <h4 class="font-bold">{{ item.name }}</h4>
            <p class="text-sm text-gray-500">{{ item.description }}</p>
        </div>
        <a href="{{ url_for('site.register', activity_id=item.id) }}" class="bg-emerald-500 text-white px-4 py-2 rounded-xl text-sm">Daftar</a>
    </div>
    {% else %}
    <p class="text-gray-400">Tidak ada kegiatan yang cocok.</p>
    {% endfor %}
</div>
"""

REGISTER_HTML = """
<h3 class="text-xl font-bold mb-2">Daftar Kegiatan</h3>
<p class="mb-6 text-emerald-700 font-medium"><i class="fas fa-calendar"></i> {{ activity.name }}</p>
<form method="POST" class="bg-white p-6 rounded-3xl shadow-lg max-w-md">
    {{ form.hidden_tag() }}
    """ + FORM_FIELDS + """
    <button type="submit" class="w-full bg-emerald-500 text-white font-bold py-3 rounded-xl">Kirim</button>
</form>
"""

CONTACT_HTML = """
<h3 class="text-xl font-bold mb-4">Hubungi Kami</h3>
<form method="POST" class="bg-white p-6 rounded-3xl shadow-lg max-w-lg">
    {{ form.hidden_tag() }}
    """ + FORM_FIELDS + """
    <button type="submit" class="w-full bg-emerald-500 text-white font-bold py-3 rounded-xl">Kirim Pesan</button>
</form>
"""

MEDIA_HTML = """
<h3 class="text-xl font-bold mb-4">Galeri Foto</h3>
<div class="grid grid-cols-2 md:grid-cols-4 gap-4 mb-10">
    {% for item in photos %}
    <div class="bg-white rounded-3xl shadow-sm overflow-hidden">
        <img src="{{ item.image_url }}" alt="{{ item.name }}" class="w-full aspect-square object-cover">
        <p class="p-3 text-xs font-bold">{{ item.name }} <span class="text-gray-400">{{ item.category }}</span></p>
    </div>
    {% else %}
    <p class="col-span-4 text-gray-400">Belum ada foto.</p>
    {% endfor %}
</div>
<h3 class="text-xl font-bold mb-4">Video</h3>
<div class="grid md:grid-cols-2 gap-4">
    {% for item in videos %}
    <div class="bg-white rounded-3xl shadow-sm overflow-hidden">
        <video controls class="w-full" {% if item.thumbnail_url %}poster="{{ item.thumbnail_url }}"{% endif %}><source src="{{ item.video_url }}"></video>
        <p class="p-3 text-sm font-bold">{{ item.name }}</p>
    </div>
    {% else %}
    <p class="col-span-2 text-gray-400">Belum ada video.</p>
    {% endfor %}
</div>
"""


@site.route('/')
def index():
    activities = services().mirror.activities[:3]
    return render_page(HOME_HTML, active_page='home', activities=activities)


@site.route('/profile')
def profile():
    return render_page(PROFILE_HTML, active_page='profile', leadership=services().mirror.leadership)


@site.route('/facilities')
def facilities():
    return render_page(FACILITIES_HTML, active_page='facilities', facilities=services().mirror.facilities)


@site.route('/activities')
def activities():
    mirror = services().mirror
    q = request.args.get('q', '').strip()
    category = request.args.get('category', '')
    items = mirror.activities_by_category(category) if category else mirror.activities
    if q:
        matches = {a.id for a in mirror.search_activities(q)}
        items = [a for a in items if a.id in matches]
    return render_page(ACTIVITIES_HTML, active_page='activities', activities=items,
                       categories=ACTIVITY_CATEGORIES, q=q, category=category)


@site.route('/activities/<activity_id>/register', methods=['GET', 'POST'])
def register(activity_id):
    activity = services().mirror.get('activities', activity_id)
    if activity is None:
        abort(404)
    form = RegistrationForm()
    if form.validate_on_submit():
        try:
            services().registrations.register(
                activity, form.full_name.data, form.phone_number.data, form.email.data)
        except RegistrationInvalid as e:
            for field, message in e.errors.items():
                getattr(form, field).errors.append(message)
        except Exception:
            logger.exception('Registration for %s failed', activity_id)
            flash('Terjadi kesalahan. Silakan coba lagi.', 'error')
        else:
            flash('Pendaftaran berhasil!', 'success')
            return redirect(url_for('site.activities'))
    return render_page(REGISTER_HTML, active_page='activities', activity=activity, form=form)


@site.route('/contact', methods=['GET', 'POST'])
def contact():
    form = ContactForm()
    if form.validate_on_submit():
        services().mirror.add_message(
            name=form.name.data, email=form.email.data,
            subject=form.subject.data, message=form.message.data)
        return redirect(url_for('site.contact'))
    return render_page(CONTACT_HTML, active_page='contact', form=form)


@site.route('/media')
def media():
    mirror = services().mirror
    return render_page(MEDIA_HTML, active_page='media', photos=mirror.photos, videos=mirror.videos)


@site.route('/media/<bucket>/<path:key>')
def media_file(bucket, key):
    store = services().blob_store
    if not isinstance(store, LocalBlobStore):
        abort(404)
    if bucket not in store.list_buckets():
        abort(404)
    return send_from_directory(os.path.join(store.root, bucket), key, max_age=3600)


if __name__ == '__main__':
    create_app().run(debug=True)
