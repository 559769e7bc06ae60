"""Per-frame driver layer around the SO(4) core."""
