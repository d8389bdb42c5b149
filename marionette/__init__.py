"""Marionette: an interactive visual debugger shell built on DearPyGui."""

__version__ = "0.1.0"
