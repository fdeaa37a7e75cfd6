"""Masjid Al-Hijrah website: public pages and admin console."""
