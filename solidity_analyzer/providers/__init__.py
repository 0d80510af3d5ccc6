"""Analysis provider discovery and loading."""
