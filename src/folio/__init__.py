"""folio: adaptive personalization and request layer for a portfolio site.

The package ranks portfolio content for a visitor's company/persona
context, guards every API route with a fixed-window rate limiter and
serves the result over FastAPI.
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
