"""CLI commands for bemorder."""

from . import (
    order_cmd,
    graph_cmd,
    config_cmd,
)

__all__ = [
    "order_cmd",
    "graph_cmd",
    "config_cmd",
]
