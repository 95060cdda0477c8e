"""State layer.

This package decides which incoming position and address snapshots are
significant, remembers what has already been announced, and defines the
immutable payloads handed to observers.
"""
