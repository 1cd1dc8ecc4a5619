"""Patient Records API: user accounts, token authentication, and patient records."""

__version__ = "1.0.0"
