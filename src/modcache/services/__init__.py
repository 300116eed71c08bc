"""Services backing the module metadata cache."""
