"""User account service: registration, login and profile management over HTTP."""

__version__ = "1.0.0"
