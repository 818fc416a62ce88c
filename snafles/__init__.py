"""
Snafles Mock API

In-memory e-commerce backend for frontend development.
"""

__version__ = "1.0.0"
