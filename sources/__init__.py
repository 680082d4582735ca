"""Data source implementations for Board Station.

Importing this package registers all built-in source types.
"""

from sources.trello_source import TrelloSource
from sources.demo_source import DemoSource

__all__ = ["TrelloSource", "DemoSource"]
