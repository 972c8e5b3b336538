"""Build C# test sources into native binaries with IL2CPP."""

__version__ = "0.1.0"
