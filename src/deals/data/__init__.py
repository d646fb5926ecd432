"""Bundled seed snapshot."""
