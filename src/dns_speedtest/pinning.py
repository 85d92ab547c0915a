"""
Process-wide resolver pinning.

Probing a resolver means routing name resolution through it for the
duration of a trial. Lookups get a scoped dnspython resolver; downloads
additionally need the socket module's resolver functions overridden,
which is process-global state. ResolverPin owns that state: only one
pin may be held at a time, and whatever it changed is put back on
every exit path.
"""

import logging
import socket
import threading
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

import dns.asyncresolver
import dns.resolver

from .errors import InvalidResolverError, ResolverBusyError

logger = logging.getLogger(__name__)

# socket attributes replaced by dns.resolver.override_system_resolver()
_SOCKET_FUNCTIONS = (
    "getaddrinfo",
    "getnameinfo",
    "getfqdn",
    "gethostbyname",
    "gethostbyname_ex",
    "gethostbyaddr",
)

ResolverFactory = Callable[[str, float], dns.asyncresolver.Resolver]


def build_resolver(address: str, timeout: float, cls=dns.asyncresolver.Resolver):
    """
    Create a dnspython resolver whose sole nameserver is ``address``.

    Args:
        address: Resolver IP address
        timeout: Per-lookup timeout and lifetime in seconds
        cls: Resolver class (async by default, sync for socket overrides)

    Raises:
        InvalidResolverError: If dnspython rejects the address
    """
    resolver = cls(configure=False)
    try:
        resolver.nameservers = [address]
    except (TypeError, ValueError) as e:
        raise InvalidResolverError(address, str(e)) from e
    resolver.timeout = timeout
    resolver.lifetime = timeout
    return resolver


def _snapshot_socket() -> dict[str, object]:
    return {name: getattr(socket, name) for name in _SOCKET_FUNCTIONS}


def _restore_socket(snapshot: dict[str, object]) -> None:
    for name, func in snapshot.items():
        setattr(socket, name, func)


class ResolverPin:
    """
    Single-owner guard for the process resolver configuration.

    Pinning is non-reentrant and non-blocking: a second pin while one is
    held is a scheduling bug and raises ResolverBusyError.
    """

    def __init__(self, resolver_factory: Optional[ResolverFactory] = None):
        self._factory = resolver_factory or build_resolver
        self._lock = threading.Lock()
        self._active: Optional[str] = None

    @property
    def active(self) -> Optional[str]:
        """Resolver currently pinned, if any."""
        return self._active

    @contextmanager
    def pinned(
        self,
        resolver: str,
        timeout: float = 5.0,
        system: bool = False,
    ) -> Iterator[dns.asyncresolver.Resolver]:
        """
        Pin resolution to ``resolver`` for the duration of the block.

        Args:
            resolver: Resolver address to pin
            timeout: Lookup timeout for the scoped resolver
            system: Also route socket-level resolution through the resolver

        Yields:
            Scoped async resolver for explicit lookups
        """
        if not self._lock.acquire(blocking=False):
            raise ResolverBusyError(
                f"Cannot pin {resolver}: {self._active} is already pinned"
            )

        snapshot = None
        try:
            handle = self._factory(resolver, timeout)
            if system:
                override = build_resolver(resolver, timeout, dns.resolver.Resolver)
                snapshot = _snapshot_socket()
                dns.resolver.override_system_resolver(override)
                logger.debug("System resolver overridden with %s", resolver)
            self._active = resolver
            yield handle
        finally:
            if snapshot is not None:
                dns.resolver.restore_system_resolver()
                _restore_socket(snapshot)
                logger.debug("System resolver restored after %s", resolver)
            self._active = None
            self._lock.release()


# Shared by every prober unless one is injected
SYSTEM_PIN = ResolverPin()
