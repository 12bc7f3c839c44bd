"""Storage backends for gauge and counter metrics: in memory with file persistence, or PostgreSQL."""

__version__ = "0.1.0"
__all__ = ["base", "filestore", "memory", "postgres"]