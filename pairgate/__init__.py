"""Pairing-code gateway API."""
