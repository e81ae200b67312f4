"""
ESG cache package.

Browser-style caching and request governance for a rate-limited ESG
scoring provider.
"""

__version__ = "1.0.0"
