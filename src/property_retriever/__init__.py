"""Property Retriever - typed configuration from command line and environment.

Values are looked up on the command line first ("--name value" or
"-n value") and in environment variables second, converted with
locale-independent rules, checked against optional allow-lists and replaced
by fallbacks when retrieval fails.
"""

from property_retriever.environment import EnvironmentAccessor, LocalEnvironment
from property_retriever.exceptions import (
    ConversionError,
    PropertyNotFoundError,
    PropertyRetrieverError,
    UsageError,
    ValidationError,
)
from property_retriever.registry import (
    add_local_environment,
    add_property_retriever,
    get_local_environment,
    get_property_retriever,
    reset_registry,
)
from property_retriever.retriever import (
    MISSING,
    PropertyQuery,
    PropertyRetriever,
    Resolution,
    Source,
)
from property_retriever.settings import RetrieverSettings, load_settings

__version__ = "0.1.0"

__all__ = [
    "MISSING",
    "ConversionError",
    "EnvironmentAccessor",
    "LocalEnvironment",
    "PropertyNotFoundError",
    "PropertyQuery",
    "PropertyRetriever",
    "PropertyRetrieverError",
    "Resolution",
    "RetrieverSettings",
    "Source",
    "UsageError",
    "ValidationError",
    "__version__",
    "add_local_environment",
    "add_property_retriever",
    "get_local_environment",
    "get_property_retriever",
    "load_settings",
    "reset_registry",
]
