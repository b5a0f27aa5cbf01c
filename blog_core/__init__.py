"""blog-core: authentication and persistence layer for a minimal blog backend."""

__version__ = "0.1.0"
