"""Small Unix-style tools, a shell command parser, an allocator model and file-system checks."""

__version__ = "0.1.0"