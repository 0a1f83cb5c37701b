from .store import AllianceStore, StoreError

__all__ = ["AllianceStore", "StoreError"]
