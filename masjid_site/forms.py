from flask_wtf import FlaskForm
from flask_wtf.file import FileField
from wtforms import PasswordField, SelectField, StringField, TextAreaField
from wtforms.validators import DataRequired, Optional, Regexp, ValidationError

from .entities import ACTIVITY_CATEGORIES, MESSAGE_SUBJECTS, PHOTO_CATEGORIES
from .registrations import is_gmail_address, is_valid_phone


# --- Forms ---
class LoginForm(FlaskForm):
    username = StringField('Username', validators=[DataRequired()])
    password = PasswordField('Password', validators=[DataRequired()])


class ContactForm(FlaskForm):
    name = StringField('Nama', validators=[DataRequired()])
    email = StringField('Email', validators=[
        DataRequired(), Regexp(r'^[^\s@]+@[^\s@]+\.[^\s@]+$', message='Alamat email tidak valid')])
    subject = SelectField('Perihal', choices=[(s, s) for s in MESSAGE_SUBJECTS])
    message = TextAreaField('Pesan', validators=[DataRequired()])


class RegistrationForm(FlaskForm):
    full_name = StringField('Nama Lengkap', validators=[DataRequired(message='Nama lengkap wajib diisi')])
    phone_number = StringField('Nomor Telepon Aktif', validators=[DataRequired(message='Nomor telepon wajib diisi')])
    email = StringField('Alamat Gmail', validators=[DataRequired(message='Email wajib diisi')])

    def validate_phone_number(self, field):
        if not is_valid_phone(field.data):
            raise ValidationError('Nomor telepon harus minimal 10 digit angka')

    def validate_email(self, field):
        if not is_gmail_address(field.data):
            raise ValidationError('Email harus menggunakan domain @gmail.com')


class LeadershipForm(FlaskForm):
    name = StringField('Nama', validators=[DataRequired()])
    position = StringField('Jabatan', validators=[DataRequired()])
    education = StringField('Pendidikan', validators=[Optional()])
    image_url = StringField('URL Foto', validators=[Optional()])
    image = FileField('Foto')


class FacilityForm(FlaskForm):
    name = StringField('Nama', validators=[DataRequired()])
    description = TextAreaField('Deskripsi', validators=[Optional()])
    image_url = StringField('URL Foto', validators=[Optional()])
    image = FileField('Foto')


class ActivityForm(FlaskForm):
    date = StringField('Tanggal', validators=[DataRequired()])
    name = StringField('Nama Kegiatan', validators=[DataRequired()])
    description = TextAreaField('Deskripsi', validators=[Optional()])
    category = SelectField('Jenis', choices=[(c, c) for c in ACTIVITY_CATEGORIES], default='community')
    image_url = StringField('URL Foto', validators=[Optional()])
    image = FileField('Foto')


class PhotoForm(FlaskForm):
    name = StringField('Judul', validators=[DataRequired()])
    description = TextAreaField('Deskripsi', validators=[Optional()])
    category = SelectField('Kategori', choices=[(c, c) for c in PHOTO_CATEGORIES], default='Events')
    image_url = StringField('URL Foto', validators=[Optional()])
    image = FileField('Foto')


class VideoForm(FlaskForm):
    name = StringField('Judul', validators=[DataRequired()])
    description = TextAreaField('Deskripsi', validators=[Optional()])
    video_url = StringField('URL Video', validators=[Optional()])
    thumbnail_url = StringField('URL Thumbnail', validators=[Optional()])
    video = FileField('Video')
    thumbnail = FileField('Thumbnail')
