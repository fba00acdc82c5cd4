from .auth import LoginRequest, LoginResponse, UserPublic
from .event import Event, EventCreate, EventCreateResult
from .participant import (
    ROSTER_COLUMNS, BulkInsertResult, ImageReference, Participant, ParticipantRecord, SearchResult,
)
from .checkin import CheckInRequest, CheckInResponse
from .stats import EventStats
