"""Base renderer protocol."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from dgraph_layout.index import GraphIndex


class Renderer(Protocol):
    """Protocol that all renderers must implement.

    A renderer reads ``num_layer``, ``get_graph_width()`` and the ``nodes``
    grid of a rendered ``GraphIndex``. It may store its own handles on each
    node (``drawn_element``, ``drawn_edges``) but must not touch the
    structural fields.
    """

    def render(self, graph: GraphIndex) -> object:
        """Draw a laid-out graph; the return value is renderer specific."""
        ...
