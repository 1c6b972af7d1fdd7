__all__ = [
    "BootConfiguration",
    "PersistentContainer",
    "SeeZeeContainer",
    "StorageContainer",
]

from .seezee import BootConfiguration, SeeZeeContainer
from .storage import PersistentContainer, StorageContainer
