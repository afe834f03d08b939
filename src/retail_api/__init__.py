"""Online Retail API: CRUD, search and analytics over a products table."""

__version__ = "1.0.0"
