"""Data source registry for Board Station.

Register data source types by name. Hosts read the `source` option of
each board in board.yaml and instantiate the right class by looking it
up here.

Usage:
    @register_source("trello")
    class TrelloSource(DataSource):
        ...
"""

import logging

logger = logging.getLogger(__name__)

SOURCE_REGISTRY = {}


def register_source(name):
    """Decorator to register a data source class by type name."""
    def decorator(cls):
        SOURCE_REGISTRY[name] = cls
        logger.debug("Registered source type: %s -> %s", name, cls.__name__)
        return cls
    return decorator


def get_source_class(name):
    """Return the source class registered under name, or None."""
    return SOURCE_REGISTRY.get(name)
