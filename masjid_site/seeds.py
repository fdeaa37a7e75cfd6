# --- DATA AWAL (dipakai saat slot penyimpanan masih kosong) ---
# Fixed ids keep seeded records stable across restarts before the first save.

LEADERSHIP_SEED = [
    {
        'id': '6f1c2b3e-1a51-4c1e-9d0b-0a1e5f3c7a01',
        'name': 'H. Abdul Rahman',
        'position': 'Ketua Takmir',
        'education': 'S1 Syariah, IAIN Samarinda',
        'image_url': '',
    },
    {
        'id': '6f1c2b3e-1a51-4c1e-9d0b-0a1e5f3c7a02',
        'name': 'Ust. Muhammad Yusuf',
        'position': 'Imam Besar',
        'education': 'Lc., Universitas Al-Azhar Kairo',
        'image_url': '',
    },
    {
        'id': '6f1c2b3e-1a51-4c1e-9d0b-0a1e5f3c7a03',
        'name': 'Siti Aminah, S.E.',
        'position': 'Bendahara',
        'education': 'S1 Ekonomi, Universitas Mulawarman',
        'image_url': '',
    },
]

FACILITIES_SEED = [
    {
        'id': '7a2d3c4f-2b62-4d2f-8e1c-1b2f6a4d8b01',
        'name': 'Ruang Sholat Utama',
        'description': 'Menampung hingga 1.000 jamaah dengan pendingin ruangan.',
        'image_url': '',
    },
    {
        'id': '7a2d3c4f-2b62-4d2f-8e1c-1b2f6a4d8b02',
        'name': 'Tempat Wudhu',
        'description': 'Area wudhu terpisah untuk laki-laki dan perempuan.',
        'image_url': '',
    },
    {
        'id': '7a2d3c4f-2b62-4d2f-8e1c-1b2f6a4d8b03',
        'name': 'Perpustakaan',
        'description': 'Koleksi kitab dan buku Islam untuk umum.',
        'image_url': '',
    },
]

ACTIVITIES_SEED = [
    {
        'id': '8b3e4d5a-3c73-4e3a-9f2d-2c3a7b5e9c01',
        'date': '2026-11-06',
        'name': 'Sholat Jumat Berjamaah',
        'description': 'Khutbah Jumat setiap pekan.',
        'image_url': None,
        'category': 'prayer',
    },
    {
        'id': '8b3e4d5a-3c73-4e3a-9f2d-2c3a7b5e9c02',
        'date': '2026-11-08',
        'name': 'Kajian Tafsir Al-Quran',
        'description': 'Kajian rutin ba\'da Maghrib bersama Ust. Muhammad Yusuf.',
        'image_url': None,
        'category': 'education',
    },
    {
        'id': '8b3e4d5a-3c73-4e3a-9f2d-2c3a7b5e9c03',
        'date': '2026-11-15',
        'name': 'Pengajian Remaja Masjid',
        'description': 'Pertemuan bulanan Ikatan Remaja Masjid.',
        'image_url': None,
        'category': 'youth',
    },
]

PHOTOS_SEED = [
    {
        'id': '9c4f5e6b-4d84-4f4b-8a3e-3d4b8c6f0d01',
        'name': 'Tampak Depan Masjid',
        'description': 'Fasad masjid setelah renovasi.',
        'image_url': 'https://images.unsplash.com/photo-1564939558297-fc396f18e5c7',
        'category': 'Architecture',
    },
]

VIDEOS_SEED = []

MESSAGES_SEED = []

SEEDS = {
    'leadership': LEADERSHIP_SEED,
    'facilities': FACILITIES_SEED,
    'activities': ACTIVITIES_SEED,
    'photos': PHOTOS_SEED,
    'videos': VIDEOS_SEED,
    'messages': MESSAGES_SEED,
}
