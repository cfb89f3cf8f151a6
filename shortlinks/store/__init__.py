from shortlinks.store.base import LinkStore
from shortlinks.store.memory import InMemoryLinkStore
from shortlinks.store.sql import SQLAlchemyLinkStore

__all__ = ["LinkStore", "InMemoryLinkStore", "SQLAlchemyLinkStore"]
