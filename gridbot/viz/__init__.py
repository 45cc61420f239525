"""Visualization layer: top-down trace rendering."""

from gridbot.viz.render import CELL_COLORS, render_trace

__all__ = ["CELL_COLORS", "render_trace"]
