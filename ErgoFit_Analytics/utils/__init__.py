"""Utility modules for temporal signal handling."""
from .event_window import EventWindow
