"""Scheduled voice-channel moves for Discord guilds."""

__version__ = "0.1.0"
