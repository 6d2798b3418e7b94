#!/usr/bin/env python3

"""
Registry of dataset filters and exporters.

Operations register themselves under a short key; the pipeline picks
them by key from its configuration.
"""

from typing import Any, Callable, Dict, List, Type

from .exceptions import ConfigurationError

FILTERS: Dict[str, Type] = {}
EXPORTERS: Dict[str, Type] = {}


def register_filter(key: str) -> Callable[[Type], Type]:
    """
    Decorator to register a dataset filter.

    Example:
        @register_filter("chromosome")
        class ChromosomeFilter:
            ...
    """
    def decorator(filter_class: Type) -> Type:
        filter_class.key = key
        FILTERS[key] = filter_class
        return filter_class
    return decorator


def register_exporter(key: str) -> Callable[[Type], Type]:
    """Decorator to register a dataset exporter."""
    def decorator(exporter_class: Type) -> Type:
        exporter_class.key = key
        EXPORTERS[key] = exporter_class
        return exporter_class
    return decorator


def create_filter(key: str, **kwargs: Any):
    """Instantiate the filter registered under ``key``."""
    if key not in FILTERS:
        raise ConfigurationError(f"Unknown filter '{key}'. Available: {', '.join(list_filters())}")
    return FILTERS[key](**kwargs)


def create_exporter(key: str, **kwargs: Any):
    """Instantiate the exporter registered under ``key``."""
    if key not in EXPORTERS:
        raise ConfigurationError(f"Unknown exporter '{key}'. Available: {', '.join(list_exporters())}")
    return EXPORTERS[key](**kwargs)


def list_filters() -> List[str]:
    return sorted(FILTERS)


def list_exporters() -> List[str]:
    return sorted(EXPORTERS)
