"""Admin console: login, dashboard and content management."""
import logging

from flask import Blueprint, abort, flash, redirect, request, url_for

from .auth import admin_required, current_admin, login_user, logout_user
from .entities import Activity, Facility, LeadershipMember, Photo, Video
from .errors import InvalidCredentials
from .flask_app import services
from .forms import ActivityForm, FacilityForm, LeadershipForm, LoginForm, PhotoForm, VideoForm
from .layout import DELETE_BUTTON, FORM_FIELDS, render_page

logger = logging.getLogger(__name__)

admin = Blueprint('admin', __name__)

LOGIN_HTML = """
<form method="POST" class="bg-white p-6 rounded-3xl shadow-lg max-w-sm mx-auto">
    <h3 class="text-lg font-bold mb-4">Login Admin</h3>
    {{ form.hidden_tag() }}
    """ + FORM_FIELDS + """
    <button type="submit" class="w-full bg-emerald-500 text-white font-bold py-3 rounded-xl">Masuk</button>
</form>
"""

DASHBOARD_HTML = """
<h3 class="text-xl font-bold mb-4">Dashboard</h3>
<div class="grid grid-cols-2 md:grid-cols-3 gap-4">
    <div class="bg-white p-5 rounded-3xl shadow-sm"><p class="text-xs text-gray-400">Pengurus</p><h4 class="text-2xl font-bold">{{ counts.leadership }}</h4></div>
    <div class="bg-white p-5 rounded-3xl shadow-sm"><p class="text-xs text-gray-400">Fasilitas</p><h4 class="text-2xl font-bold">{{ counts.facilities }}</h4></div>
    <div class="bg-white p-5 rounded-3xl shadow-sm"><p class="text-xs text-gray-400">Kegiatan</p><h4 class="text-2xl font-bold">{{ counts.activities }}</h4></div>
    <div class="bg-white p-5 rounded-3xl shadow-sm"><p class="text-xs text-gray-400">Foto / Video</p><h4 class="text-2xl font-bold">{{ counts.photos }} / {{ counts.videos }}</h4></div>
    <div class="bg-white p-5 rounded-3xl shadow-sm"><p class="text-xs text-gray-400">Pesan</p><h4 class="text-2xl font-bold">{{ counts.unread_messages }} belum dibaca dari {{ counts.messages }}</h4></div>
</div>
"""

# Shared list + form page for the five editable collections.
MANAGE_HTML = """
<div class="grid md:grid-cols-3 gap-6">
    <div class="md:col-span-2 bg-white rounded-3xl shadow-sm divide-y">
        {% for item in items %}
        <div class="p-4 flex justify-between items-start">
            <div>
                <p class="font-bold text-sm">{{ item.name }}</p>
                <p class="text-xs text-gray-400">{% for col in columns %}{{ item[col] if item[col] is not none else '' }}{{ ' · ' if not loop.last }}{% endfor %}</p>
            </div>
            <div class="flex gap-3">
                <a href="?edit_id={{ item.id }}" class="text-emerald-600 text-xs"><i class="fas fa-pen"></i> Edit</a>
                {% set action = url_for(delete_endpoint, record_id=item.id) %}
                """ + DELETE_BUTTON + """
            </div>
        </div>
        {% else %}
        <p class="p-6 text-center text-gray-400 text-sm">Belum ada data.</p>
        {% endfor %}
    </div>
    <form method="POST" action="{{ url_for(save_endpoint) }}" enctype="multipart/form-data" class="bg-white p-5 rounded-3xl shadow-sm">
        <h4 class="font-bold mb-3">{{ 'Edit' if edit_id else 'Tambah' }} {{ heading }}</h4>
        {{ form.hidden_tag() }}
        <input type="hidden" name="record_id" value="{{ edit_id or '' }}">
        """ + FORM_FIELDS + """
        <button type="submit" class="w-full bg-emerald-500 text-white font-bold py-3 rounded-xl">Simpan</button>
    </form>
</div>
"""

MESSAGES_HTML = """
<div class="flex justify-between items-center mb-4">
    <h3 class="text-xl font-bold">Pesan Masuk</h3>
    <div class="text-sm"><a href="?filter=all&q={{ q | urlencode }}">Semua</a> · <a href="?filter=unread&q={{ q | urlencode }}">Belum dibaca ({{ unread }})</a></div>
</div>
<form method="GET" class="flex gap-2 mb-4 text-sm">
    <input type="hidden" name="filter" value="{{ status }}">
    <input type="text" name="q" value="{{ q }}" placeholder="Cari nama, email, perihal atau isi pesan" class="flex-1 border rounded-xl p-2">
    <button class="bg-emerald-500 text-white px-4 rounded-xl">Cari</button>
</form>
<div class="bg-white rounded-3xl shadow-sm divide-y">
    {% for m in messages %}
    <div class="p-4 flex justify-between {{ 'bg-emerald-50' if not m.is_read }}">
        <a href="{{ url_for('admin.view_message', record_id=m.id) }}">
            <p class="text-sm {{ 'font-bold' if not m.is_read }}">{{ m.name }} &lt;{{ m.email }}&gt; · {{ m.subject }}</p>
            <p class="text-xs text-gray-400">{{ m.date }}</p>
        </a>
        {% set action = url_for('admin.delete_message', record_id=m.id) %}
        """ + DELETE_BUTTON + """
    </div>
    {% else %}
    <p class="p-6 text-center text-gray-400 text-sm">Belum ada pesan.</p>
    {% endfor %}
</div>
"""

MESSAGE_DETAIL_HTML = """
<a href="{{ url_for('admin.messages') }}" class="text-sm text-emerald-600">&larr; Kembali</a>
<div class="bg-white p-6 rounded-3xl shadow-sm mt-4">
    <p class="text-xs text-gray-400">{{ m.date }} · {{ m.subject }}</p>
    <h4 class="font-bold">{{ m.name }} &lt;{{ m.email }}&gt;</h4>
    <p class="mt-4 whitespace-pre-line text-sm">{{ m.message }}</p>
</div>
"""

REGISTRATIONS_HTML = """
<h3 class="text-xl font-bold mb-4">Pendaftaran Kegiatan</h3>
<form method="GET" class="flex flex-wrap gap-2 mb-4 text-sm">
    <input type="text" name="q" value="{{ q or '' }}" placeholder="Cari nama, email, telepon" class="border rounded-xl p-2">
    <select name="activity" class="border rounded-xl p-2">
        <option value="">Semua kegiatan</option>
        {% for name in activity_names %}<option value="{{ name }}" {{ 'selected' if name == activity }}>{{ name }}</option>{% endfor %}
    </select>
    <input type="date" name="date" value="{{ date or '' }}" class="border rounded-xl p-2">
    <button class="bg-emerald-500 text-white px-4 rounded-xl">Filter</button>
</form>
<table class="w-full bg-white rounded-3xl shadow-sm text-sm">
    <tr class="text-left text-gray-400"><th class="p-3">Nama</th><th>Telepon</th><th>Email</th><th>Kegiatan</th><th>Tanggal</th></tr>
    {% for r in rows %}
    <tr class="border-t"><td class="p-3">{{ r.full_name }}</td><td>{{ r.phone_number }}</td><td>{{ r.email }}</td><td>{{ r.activity_name }}</td><td>{{ r.registration_date[:16].replace('T', ' ') }}</td></tr>
    {% else %}
    <tr><td colspan="5" class="p-6 text-center text-gray-400">Belum ada pendaftaran.</td></tr>
    {% endfor %}
</table>
"""


# --- Helpers ---

def upload_or_keep(file, bucket, current_url):
    """Upload ``file`` if one was chosen; returns (ok, url)."""
    if file is None or not getattr(file, 'filename', ''):
        return True, current_url
    result = services().gatekeeper.upload(file, bucket)
    if not result:
        flash(result.reason, 'error')
        return False, current_url
    return True, result.url


def manage_page(slot, form, heading, active_page, columns, save_endpoint, delete_endpoint):
    edit_id = request.args.get('edit_id')
    if edit_id and request.method == 'GET':
        record = services().mirror.get(slot, edit_id)
        if record is None:
            abort(404)
        form.process(obj=record)
    return render_page(
        MANAGE_HTML, active_page=active_page, admin_area=True, title=heading,
        items=[item.to_dict() for item in services().mirror.all(slot)], form=form,
        heading=heading, columns=columns, edit_id=edit_id,
        save_endpoint=save_endpoint, delete_endpoint=delete_endpoint)


def existing(slot):
    """Record being edited by the current form post, or None when adding."""
    record_id = request.form.get('record_id')
    if not record_id:
        return None
    record = services().mirror.get(slot, record_id)
    if record is None:
        abort(404)
    return record


def flash_form_errors(form):
    for field, errors in form.errors.items():
        for error in errors:
            flash(f'{getattr(form, field).label.text}: {error}', 'error')


# --- Auth ---

@admin.route('/login', methods=['GET', 'POST'])
def login():
    if current_admin() is not None:
        return redirect(url_for('admin.dashboard'))
    form = LoginForm()
    if form.validate_on_submit():
        try:
            identity = services().verifier.verify(form.username.data, form.password.data)
        except InvalidCredentials:
            logger.warning('Failed admin login for %r', form.username.data)
            flash('ID atau Password salah!', 'error')
        else:
            login_user(identity)
            flash('Login berhasil!', 'success')
            return redirect(url_for('admin.dashboard'))
    return render_page(LOGIN_HTML, title='Login Admin', form=form)


@admin.route('/logout')
def logout():
    logout_user()
    flash('Anda telah keluar.', 'info')
    return redirect(url_for('admin.login'))


@admin.route('/')
@admin_required
def dashboard():
    return render_page(DASHBOARD_HTML, active_page='dashboard', admin_area=True,
                       counts=services().mirror.counts())


# --- Leadership ---

@admin.route('/leadership')
@admin_required
def leadership():
    return manage_page('leadership', LeadershipForm(), 'Pengurus', 'leadership',
                       ['position', 'education'], 'admin.save_leadership', 'admin.delete_leadership')


@admin.route('/leadership/save', methods=['POST'])
@admin_required
def save_leadership():
    form = LeadershipForm()
    if not form.validate_on_submit():
        flash_form_errors(form)
        return redirect(url_for('admin.leadership'))
    record = existing('leadership')
    ok, image_url = upload_or_keep(form.image.data, 'photos', form.image_url.data or '')
    if not ok:
        return redirect(url_for('admin.leadership'))
    mirror = services().mirror
    if record is None:
        mirror.add_leadership_member(name=form.name.data, position=form.position.data,
                                     education=form.education.data, image_url=image_url)
    else:
        mirror.update_leadership_member(LeadershipMember(
            id=record.id, name=form.name.data, position=form.position.data,
            education=form.education.data or '', image_url=image_url))
    return redirect(url_for('admin.leadership'))


@admin.route('/leadership/<record_id>/delete', methods=['POST'])
@admin_required
def delete_leadership(record_id):
    services().mirror.delete_leadership_member(record_id)
    return redirect(url_for('admin.leadership'))


# --- Facilities ---

@admin.route('/facilities')
@admin_required
def facilities():
    return manage_page('facilities', FacilityForm(), 'Fasilitas', 'facilities',
                       ['description'], 'admin.save_facility', 'admin.delete_facility')


@admin.route('/facilities/save', methods=['POST'])
@admin_required
def save_facility():
    form = FacilityForm()
    if not form.validate_on_submit():
        flash_form_errors(form)
        return redirect(url_for('admin.facilities'))
    record = existing('facilities')
    ok, image_url = upload_or_keep(form.image.data, 'photos', form.image_url.data or '')
    if not ok:
        return redirect(url_for('admin.facilities'))
    mirror = services().mirror
    if record is None:
        mirror.add_facility(name=form.name.data, description=form.description.data, image_url=image_url)
    else:
        mirror.update_facility(Facility(id=record.id, name=form.name.data,
                                        description=form.description.data or '', image_url=image_url))
    return redirect(url_for('admin.facilities'))


@admin.route('/facilities/<record_id>/delete', methods=['POST'])
@admin_required
def delete_facility(record_id):
    services().mirror.delete_facility(record_id)
    return redirect(url_for('admin.facilities'))


# --- Activities ---

@admin.route('/activities')
@admin_required
def activities():
    return manage_page('activities', ActivityForm(), 'Kegiatan', 'activities',
                       ['date', 'category'], 'admin.save_activity', 'admin.delete_activity')


@admin.route('/activities/save', methods=['POST'])
@admin_required
def save_activity():
    form = ActivityForm()
    if not form.validate_on_submit():
        flash_form_errors(form)
        return redirect(url_for('admin.activities'))
    record = existing('activities')
    ok, image_url = upload_or_keep(form.image.data, 'photos', form.image_url.data or None)
    if not ok:
        return redirect(url_for('admin.activities'))
    mirror = services().mirror
    if record is None:
        mirror.add_activity(date=form.date.data, name=form.name.data, description=form.description.data,
                            image_url=image_url, category=form.category.data)
    else:
        mirror.update_activity(Activity(
            id=record.id, date=form.date.data, name=form.name.data,
            description=form.description.data or '', image_url=image_url, category=form.category.data))
    return redirect(url_for('admin.activities'))


@admin.route('/activities/<record_id>/delete', methods=['POST'])
@admin_required
def delete_activity(record_id):
    services().mirror.delete_activity(record_id)
    return redirect(url_for('admin.activities'))


# --- Media ---

@admin.route('/media')
@admin_required
def media():
    return manage_page('photos', PhotoForm(), 'Foto', 'media',
                       ['category', 'image_url'], 'admin.save_photo', 'admin.delete_photo')


@admin.route('/media/videos')
@admin_required
def videos():
    return manage_page('videos', VideoForm(), 'Video', 'videos',
                       ['video_url', 'thumbnail_url'], 'admin.save_video', 'admin.delete_video')


@admin.route('/media/photos/save', methods=['POST'])
@admin_required
def save_photo():
    form = PhotoForm()
    if not form.validate_on_submit():
        flash_form_errors(form)
        return redirect(url_for('admin.media'))
    record = existing('photos')
    ok, image_url = upload_or_keep(form.image.data, 'photos', form.image_url.data or '')
    if not ok:
        return redirect(url_for('admin.media'))
    if not image_url:
        flash('Foto wajib diunggah atau diisi URL-nya.', 'error')
        return redirect(url_for('admin.media'))
    mirror = services().mirror
    if record is None:
        mirror.add_photo(name=form.name.data, image_url=image_url,
                         description=form.description.data, category=form.category.data)
    else:
        mirror.update_photo(Photo(id=record.id, name=form.name.data, image_url=image_url,
                                  description=form.description.data or '', category=form.category.data))
    return redirect(url_for('admin.media'))


@admin.route('/media/photos/<record_id>/delete', methods=['POST'])
@admin_required
def delete_photo(record_id):
    services().mirror.delete_photo(record_id)
    return redirect(url_for('admin.media'))


@admin.route('/media/videos/save', methods=['POST'])
@admin_required
def save_video():
    form = VideoForm()
    if not form.validate_on_submit():
        flash_form_errors(form)
        return redirect(url_for('admin.videos'))
    record = existing('videos')
    ok, video_url = upload_or_keep(form.video.data, 'videos', form.video_url.data or '')
    if not ok:
        return redirect(url_for('admin.videos'))
    ok, thumbnail_url = upload_or_keep(form.thumbnail.data, 'photos', form.thumbnail_url.data or None)
    if not ok:
        return redirect(url_for('admin.videos'))
    if not video_url:
        flash('Video wajib diunggah atau diisi URL-nya.', 'error')
        return redirect(url_for('admin.videos'))
    mirror = services().mirror
    if record is None:
        mirror.add_video(name=form.name.data, video_url=video_url,
                         description=form.description.data, thumbnail_url=thumbnail_url)
    else:
        mirror.update_video(Video(id=record.id, name=form.name.data, video_url=video_url,
                                  description=form.description.data or '', thumbnail_url=thumbnail_url))
    return redirect(url_for('admin.videos'))


@admin.route('/media/videos/<record_id>/delete', methods=['POST'])
@admin_required
def delete_video(record_id):
    services().mirror.delete_video(record_id)
    return redirect(url_for('admin.videos'))


# --- Messages ---

@admin.route('/messages')
@admin_required
def messages():
    mirror = services().mirror
    q = request.args.get('q', '').strip()
    status = request.args.get('filter', 'all')
    items = mirror.search_messages(q, unread_only=status == 'unread')
    items.sort(key=lambda m: m.date, reverse=True)
    return render_page(MESSAGES_HTML, active_page='messages', admin_area=True,
                       messages=items, unread=mirror.counts()['unread_messages'], q=q, status=status)


@admin.route('/messages/<record_id>')
@admin_required
def view_message(record_id):
    mirror = services().mirror
    message = mirror.get('messages', record_id)
    if message is None:
        abort(404)
    if not message.is_read:
        mirror.update_message_read_status(record_id, True)
    return render_page(MESSAGE_DETAIL_HTML, active_page='messages', admin_area=True, m=message)


@admin.route('/messages/<record_id>/delete', methods=['POST'])
@admin_required
def delete_message(record_id):
    services().mirror.delete_message(record_id)
    return redirect(url_for('admin.messages'))


# --- Registrations ---

@admin.route('/registrations')
@admin_required
def registrations():
    book = services().registrations
    q = request.args.get('q', '').strip()
    activity = request.args.get('activity', '')
    date = request.args.get('date', '')
    rows = book.list(search=q or None, activity_name=activity or None, date=date or None)
    return render_page(REGISTRATIONS_HTML, active_page='registrations', admin_area=True,
                       rows=rows, activity_names=book.activity_names(), q=q, activity=activity, date=date)
