__all__ = [
    "BootConfiguration",
    "di",
    "SeeZeeContainer",
    "LoggingProvider",
    "Settings",
    "Secrets",
    "TimestampProvider",
]


from . import di
from .config import Secrets, Settings
from .container import BootConfiguration, SeeZeeContainer
from .provider import LoggingProvider, TimestampProvider
