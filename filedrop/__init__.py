"""filedrop - expiring file drop service."""

__version__ = "1.0.0"
