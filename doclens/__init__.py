"""doclens — fetch a documentation page, clean it, and summarise it."""

__version__ = "0.1.0"
