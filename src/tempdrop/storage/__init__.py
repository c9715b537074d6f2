"""Storage core: naming, registry, payloads, recovery and the store facade."""

from .filename_codec import FilenameCodec, NamingScheme
from .object_registry import ObjectRegistry
from .object_store import ObjectStore
from .payload_store import PayloadStore
from .recovery import recover_registry
from .storage_models import (
    DecodedName,
    DeletionFailure,
    RecoveryReport,
    StoredObject,
    SweepReport,
)

__all__ = [
    "DecodedName",
    "DeletionFailure",
    "FilenameCodec",
    "NamingScheme",
    "ObjectRegistry",
    "ObjectStore",
    "PayloadStore",
    "RecoveryReport",
    "StoredObject",
    "SweepReport",
    "recover_registry",
]
