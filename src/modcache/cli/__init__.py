"""Command-line interface for inspecting the module metadata cache."""
