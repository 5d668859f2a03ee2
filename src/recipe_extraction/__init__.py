"""Recipe extraction from social-media post URLs."""

__version__ = "0.1.0"
