"""dependency-injector names used across the project, plus wiring.

Storage and service functions take their session and clock as
`di.Provide[...]` defaults and are called either with explicit arguments
(tests, nested calls) or with none, in which case the wired container
supplies them.
"""

from __future__ import annotations

__all__ = [
    "Container",
    "NotReady",
    "Provide",
    "Provider",
    "WiredPackages",
    "inject",
    "wire",
]

import sys
import typing as t

from dependency_injector.containers import Container
from dependency_injector.providers import Provider
from dependency_injector.wiring import inject, Provide

from seezee.lib import NotReady

# imported and wired in full at boot
WiredPackages: t.Final = ("seezee.storage", "seezee.assignment")


def wire(container: Container) -> list[str]:
    """Wire the service packages, then every other seezee module imported so far.

    CLI command modules are imported on demand before boot, so they are
    picked up by the second pass. Returns the modules wired in that pass.
    """
    container.wire(packages=list(WiredPackages))
    loaded = sorted(
        name
        for name in sys.modules
        if name.startswith("seezee.") and not name.startswith(WiredPackages)
    )
    if loaded:
        container.wire(modules=loaded)
    return loaded
