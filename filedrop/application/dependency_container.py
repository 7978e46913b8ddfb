"""
Service registry for one filedrop application.

app_factory registers the stores, the expiry cache and the services once at
startup. Routes and the Celery sweep task look them up on app.container.
"""

import logging
import threading
from typing import Any, Dict, Type, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar('T')


class DependencyNotFoundError(LookupError):
    """No instance is registered for the requested type."""


class DependencyContainer:
    """Type-keyed map of the shared instances of an application."""

    def __init__(self):
        self._instances: Dict[Type, Any] = {}
        self._overrides: Dict[Type, Any] = {}
        self._lock = threading.Lock()

    def register_singleton(self, interface: Type[T], implementation: T) -> None:
        with self._lock:
            self._instances[interface] = implementation
        logger.debug(f"Registered {interface.__name__}")

    def override(self, interface: Type[T], implementation: T) -> None:
        """Shadow the registered instance, e.g. with a failing store in a test."""
        with self._lock:
            self._overrides[interface] = implementation
        logger.debug(f"Overridden {interface.__name__}")

    def resolve(self, interface: Type[T]) -> T:
        """
        Raises:
            DependencyNotFoundError: If nothing is registered for interface
        """
        with self._lock:
            if interface in self._overrides:
                return self._overrides[interface]
            try:
                return self._instances[interface]
            except KeyError:
                raise DependencyNotFoundError(
                    f"{interface.__name__} is not registered"
                ) from None
