"""
Persistence of workspace collections.
"""

from stubdriver.storage.state_store import StateStore, InMemoryStateStore, JsonFileStateStore

__all__ = ['StateStore', 'InMemoryStateStore', 'JsonFileStateStore']
