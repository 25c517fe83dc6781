"""Import all models so Base.metadata knows every table."""
from pos_sync.infrastructure.db.models.catalog import (
    CachedCategoryModel,
    CachedCustomerModel,
    CachedProductModel,
)
from pos_sync.infrastructure.db.models.outbox import OutboxEntryModel
from pos_sync.infrastructure.db.models.sync_state import SyncStateModel

__all__ = [
    "CachedCategoryModel",
    "CachedCustomerModel",
    "CachedProductModel",
    "OutboxEntryModel",
    "SyncStateModel",
]
