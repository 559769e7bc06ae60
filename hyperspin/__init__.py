"""hyperspin: SO(4) rotation core for four-dimensional polytope visualization."""

__version__ = "0.1.0"
