"""procwatch: restart a child process whenever it exits abnormally."""

__version__ = "0.1.0"
