"""farmguard - farm equipment maintenance tracker with CSV import/export."""

__version__ = "0.1.0"
