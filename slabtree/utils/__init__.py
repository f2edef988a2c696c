from .event_logger import EventLogger
from .validation import check_invariants
