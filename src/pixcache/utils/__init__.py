"""Utilities: image codec and storage helpers."""
