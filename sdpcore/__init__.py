"""Block-structured matrices, solver parameters and sparse Schur-complement patterns for SDP."""

__version__ = "0.1.0"
__all__ = ["matrices", "schur", "settings", "spaces"]