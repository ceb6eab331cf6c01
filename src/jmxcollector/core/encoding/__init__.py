"""Encoders for serving collected data."""
