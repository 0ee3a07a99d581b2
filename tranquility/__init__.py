"""Tranquility — bootstrap applications, VPS profiles and configuration."""

__version__ = "0.1.0"
