"""prompt-fanout: send one prompt to many hosted models.

This package fans a prompt out to every model in a static registry,
collects their generations, and returns them as one JSON payload.
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
