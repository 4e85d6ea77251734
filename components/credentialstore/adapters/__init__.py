from .inmemory import InMemoryCredentialStore
from .sql import SqlCredentialStore, create_store_engine, init_schema
