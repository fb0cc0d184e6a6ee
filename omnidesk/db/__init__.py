"""Local JSON persistence for OmniDesk."""

from omnidesk.db.store import ALERTS, SCHEDULES, Collection, CollectionStore, LocalStore

__all__ = ["ALERTS", "SCHEDULES", "Collection", "CollectionStore", "LocalStore"]
