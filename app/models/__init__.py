from .base import BaseModel
from .user import User
from .event import Event
from .participant import Participant, ImageStorageKind
