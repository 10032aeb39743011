"""Memory arenas and allocators, render maths and batching, IFB asset files and a frame-budget estimator for a small 2D game."""

__version__ = "0.1.0"

__all__ = [
    "allocators",
    "asset_builder",
    "asset_format",
    "guesstimater",
    "memory_core",
    "render_batches",
    "render_geometry",
    "render_types",
    "renderer_memory",
]