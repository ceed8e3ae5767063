"""Matplotlib rendering of view snapshots."""
