"""Packaged JSON schemas for elevx."""
