"""tempdrop: ephemeral file drop with automatic expiry."""

__version__ = "0.1.0"
