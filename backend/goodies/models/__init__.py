from .auth import User
from .inventory import Collection, Product
from .events import Event, EventParticipant, EventProduct

__all__ = [
    'User',
    'Collection', 'Product',
    'Event', 'EventParticipant', 'EventProduct',
]
