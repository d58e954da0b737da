"""dgraph-layout: layered (Sugiyama-style) layout of directed graphs onto a grid."""

from dgraph_layout.config import LayoutConfig
from dgraph_layout.graph import GraphData, GraphModel, NodeSpec, ValidationError
from dgraph_layout.index import GraphIndex
from dgraph_layout.node import EdgeChain, GraphNode

__version__ = "0.1.0"

__all__ = [
    "EdgeChain",
    "GraphData",
    "GraphIndex",
    "GraphModel",
    "GraphNode",
    "LayoutConfig",
    "NodeSpec",
    "ValidationError",
]
