from flask import render_template_string

# ==========================================
# UI / TEMPLATES (JINJA2 + TAILWIND)
# ==========================================
BASE_LAYOUT = """
<!DOCTYPE html>
<html lang="id">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{{ title or 'Masjid Al-Hijrah' }}</title>
    <script src="https://cdn.tailwindcss.com"></script>
    <link rel="stylesheet" href="https://cdnjs.cloudflare.com/ajax/libs/font-awesome/6.4.0/css/all.min.css">
</head>
<body class="bg-gray-50 text-gray-800">
    <nav class="bg-emerald-700 text-white px-6 py-4 flex flex-wrap gap-4 items-center">
        <a href="{{ url_for('site.index') }}" class="font-bold text-lg mr-auto">Masjid Al-Hijrah</a>
        {% if admin_area %}
            <a href="{{ url_for('admin.dashboard') }}" class="{{ 'underline' if active_page == 'dashboard' }}">Dashboard</a>
            <a href="{{ url_for('admin.leadership') }}" class="{{ 'underline' if active_page == 'leadership' }}">Pengurus</a>
            <a href="{{ url_for('admin.facilities') }}" class="{{ 'underline' if active_page == 'facilities' }}">Fasilitas</a>
            <a href="{{ url_for('admin.activities') }}" class="{{ 'underline' if active_page == 'activities' }}">Kegiatan</a>
            <a href="{{ url_for('admin.media') }}" class="{{ 'underline' if active_page == 'media' }}">Foto</a>
            <a href="{{ url_for('admin.videos') }}" class="{{ 'underline' if active_page == 'videos' }}">Video</a>
            <a href="{{ url_for('admin.messages') }}" class="{{ 'underline' if active_page == 'messages' }}">Pesan</a>
            <a href="{{ url_for('admin.registrations') }}" class="{{ 'underline' if active_page == 'registrations' }}">Pendaftaran</a>
            <a href="{{ url_for('admin.logout') }}"><i class="fas fa-sign-out-alt"></i></a>
        {% else %}
            <a href="{{ url_for('site.profile') }}" class="{{ 'underline' if active_page == 'profile' }}">Profil</a>
            <a href="{{ url_for('site.facilities') }}" class="{{ 'underline' if active_page == 'facilities' }}">Fasilitas</a>
            <a href="{{ url_for('site.activities') }}" class="{{ 'underline' if active_page == 'activities' }}">Kegiatan</a>
            <a href="{{ url_for('site.media') }}" class="{{ 'underline' if active_page == 'media' }}">Media</a>
            <a href="{{ url_for('site.contact') }}" class="{{ 'underline' if active_page == 'contact' }}">Kontak</a>
        {% endif %}
    </nav>
    <div class="max-w-5xl mx-auto px-5 py-8">
        {% with messages = get_flashed_messages(with_categories=true) %}
            {% for category, message in messages %}
            <div class="mb-3 px-4 py-3 rounded-xl text-sm {{ 'bg-red-100 text-red-700' if category == 'error' else ('bg-yellow-100 text-yellow-800' if category == 'warning' else 'bg-emerald-100 text-emerald-700') }}">{{ message }}</div>
            {% endfor %}
        {% endwith %}
        {{ content | safe }}
    </div>
</body>
</html>
"""

FIELD_CLASS = 'w-full bg-gray-50 border border-gray-200 rounded-xl p-3 text-sm'

FORM_FIELDS = """
{% for field in form if field.type not in ('CSRFTokenField', 'HiddenField') %}
<div class="mb-3">
    <label class="block text-xs font-bold text-gray-500 mb-1">{{ field.label.text }}</label>
    {{ field(class_='""" + FIELD_CLASS + """') }}
    {% for error in field.errors %}<p class="text-red-500 text-xs mt-1">{{ error }}</p>{% endfor %}
</div>
{% endfor %}
"""

DELETE_BUTTON = """
<form method="POST" action="{{ action }}" class="inline-block">
    <input type="hidden" name="csrf_token" value="{{ csrf_token() }}">
    <button class="text-red-500 text-xs" onclick="return confirm('Hapus?')"><i class="fas fa-trash"></i> Hapus</button>
</form>
"""


def render_page(content, active_page=None, title=None, admin_area=False, **context):
    return render_template_string(
        BASE_LAYOUT, active_page=active_page, title=title, admin_area=admin_area,
        content=render_template_string(content, **context))
