"""
CredentialStore package export surface.
"""

from .contracts import UserRecord, FollowRecord, PostRecord, Constraints
from .errors import StoreError, ConstraintViolation, RecordNotFound, StoreUnavailable
from .ports import UserStorePort, FollowStorePort, PostStorePort, CredentialStorePort
from .adapters.inmemory import InMemoryCredentialStore
