"""Mailboxes, binary buffers, events, sync channels, structured logging and small utilities."""

__version__ = "0.1.0"