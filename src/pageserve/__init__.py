"""pageserve - HTTPS static file server for manual browser testing."""

__version__ = "0.1.0"
