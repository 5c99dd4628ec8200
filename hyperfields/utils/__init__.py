"""Utility helpers shared across HyperFields."""
