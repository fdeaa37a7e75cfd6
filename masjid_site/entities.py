import uuid
from dataclasses import dataclass, asdict, fields
from typing import Optional

ACTIVITY_CATEGORIES = ('prayer', 'education', 'youth', 'community')
PHOTO_CATEGORIES = ('Events', 'Architecture', 'Community', 'Activities', 'Other')
MESSAGE_SUBJECTS = ('general', 'prayer', 'activities', 'donation', 'volunteer', 'other')


def new_id():
    return str(uuid.uuid4())


class Entity:
    """Mixin shared by every record kept in the mirror."""

    def to_dict(self):
        return asdict(self)

    @classmethod
    def from_dict(cls, data):
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass
class LeadershipMember(Entity):
    id: str
    name: str
    position: str
    education: str = ''
    image_url: str = ''


@dataclass
class Facility(Entity):
    id: str
    name: str
    description: str = ''
    image_url: str = ''


@dataclass
class Activity(Entity):
    id: str
    date: str
    name: str
    description: str = ''
    image_url: Optional[str] = None
    category: str = 'community'


@dataclass
class Photo(Entity):
    id: str
    name: str
    image_url: str
    description: str = ''
    category: str = 'Events'


@dataclass
class Video(Entity):
    id: str
    name: str
    video_url: str
    description: str = ''
    thumbnail_url: Optional[str] = None


@dataclass
class ContactMessage(Entity):
    id: str
    name: str
    email: str
    subject: str
    message: str
    date: str
    is_read: bool = False
