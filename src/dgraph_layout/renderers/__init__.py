from dgraph_layout.renderers.base import Renderer

__all__ = ["Renderer"]
