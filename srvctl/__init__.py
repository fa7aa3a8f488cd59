"""Building blocks for a hosting API command-line client: hosts, listings, layouts and configuration."""

__version__ = "0.1.0"

__all__ = ["common", "dedicated", "hostops", "layout", "listing", "settings"]