__all__ = [
    "NotReady",
    "NotSet",
]

from .sentinel import NotReady, NotSet
