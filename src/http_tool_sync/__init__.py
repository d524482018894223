"""Keep an HTTP tool's URL template and its structured parameter lists in sync."""

__version__ = "0.1.0"
