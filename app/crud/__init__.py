from .user import user
from .event import event
from .participant import participant

__all__ = ["user", "event", "participant"]
