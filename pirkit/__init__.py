"""Configuration, operators, batch files, batch metadata and timing profiles for a private information retrieval service."""

__version__ = "0.1.0"