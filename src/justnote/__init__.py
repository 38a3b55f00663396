"""Multi-tab text editor with session restore, find/replace and auto-save."""

__version__ = "0.1.0"
