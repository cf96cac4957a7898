"""Conversational agent that edits remote repositories through their content API."""

__version__ = "0.1.0"
