"""graphwalk - Graph editor with a step-by-step depth-first traversal visualizer."""

__version__ = "0.1.0"
