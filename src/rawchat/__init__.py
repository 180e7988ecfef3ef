"""rawchat — interactive raw TCP chat client."""

__version__ = "0.1.0"
