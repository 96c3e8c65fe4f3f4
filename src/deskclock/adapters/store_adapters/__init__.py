from deskclock.adapters.store_adapters.sqlite_store_adapter import SqliteStoreAdapter
from deskclock.adapters.store_adapters.memory_store_adapter import MemoryStoreAdapter
