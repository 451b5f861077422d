"""Process-wide registration of the retriever and its environment accessor.

Both services are singletons: created on first use and reused for the life
of the process. add_property_retriever() registers the same instances in a
caller-owned service container.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import MutableMapping
from typing import Any

from property_retriever.environment import LocalEnvironment
from property_retriever.retriever import PropertyRetriever
from property_retriever.settings import load_settings

logger = logging.getLogger(__name__)

# Thread-safe module-level singletons (lazy-loaded)
_local_environment: LocalEnvironment | None = None
_property_retriever: PropertyRetriever | None = None
_registry_lock = threading.Lock()


def get_local_environment() -> LocalEnvironment:
    """Get or create the process-wide LocalEnvironment.

    Returns:
        The shared LocalEnvironment instance.
    """
    global _local_environment

    # Fast path: if already initialized, return without lock
    if _local_environment is not None:
        return _local_environment

    with _registry_lock:
        # Double-check after acquiring lock
        if _local_environment is None:
            _local_environment = LocalEnvironment()
    return _local_environment


def get_property_retriever() -> PropertyRetriever:
    """Get or create the process-wide PropertyRetriever.

    The retriever reads through get_local_environment() and is configured
    from PROPERTY_RETRIEVER_* environment overrides at creation time.

    Returns:
        The shared PropertyRetriever instance.
    """
    global _property_retriever

    if _property_retriever is not None:
        return _property_retriever

    environment = get_local_environment()
    with _registry_lock:
        if _property_retriever is None:
            _property_retriever = PropertyRetriever(environment, load_settings())
            logger.debug("Created shared PropertyRetriever")
    return _property_retriever


def add_local_environment(
    container: MutableMapping[Any, Any],
) -> MutableMapping[Any, Any]:
    """Register the shared LocalEnvironment in a service container.

    An existing registration for LocalEnvironment is left untouched.

    Args:
        container: Mapping from service type to instance.

    Returns:
        The same container, for chaining.
    """
    container.setdefault(LocalEnvironment, get_local_environment())
    return container


def add_property_retriever(
    container: MutableMapping[Any, Any],
) -> MutableMapping[Any, Any]:
    """Register the shared PropertyRetriever and its LocalEnvironment.

    Existing registrations are left untouched.

    Args:
        container: Mapping from service type to instance.

    Returns:
        The same container, for chaining.
    """
    add_local_environment(container)
    container.setdefault(PropertyRetriever, get_property_retriever())
    return container


def reset_registry() -> None:
    """Drop the shared instances so the next lookup creates new ones."""
    global _local_environment, _property_retriever
    with _registry_lock:
        _local_environment = None
        _property_retriever = None
