"""Thin interactive shell around the preview core: listing, keys, terminal, frame."""
