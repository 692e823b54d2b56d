# src/todot/__init__.py

"""todot: a keyboard-driven terminal task list."""

__version__ = "0.1.0"
