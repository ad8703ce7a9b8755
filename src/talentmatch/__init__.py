"""Interview-driven candidate profiling, scoring and matching."""

__version__ = "0.1.0"
