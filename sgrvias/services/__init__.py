"""Services layer - store, notifications and derived views"""

from sgrvias.services.domain_store import DomainStore, StoreSnapshot
from sgrvias.services.notifications import NotificationChannel

__all__ = [
    "DomainStore",
    "StoreSnapshot",
    "NotificationChannel",
]
