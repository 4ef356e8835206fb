"""Toodoo: personal task tracking with a free-text / voice command interpreter."""

__version__ = "0.1.0"
