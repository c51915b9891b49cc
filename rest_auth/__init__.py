"""REST authentication service: registration, login and refresh-token renewal."""

__version__ = "1.0.0"
