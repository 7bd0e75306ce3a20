"""
Gator - RSS feed aggregator.

A command-line aggregator that polls registered RSS feeds, stores new posts
exactly once, and lets users follow the feeds they care about.
"""

__version__ = "1.0.0"
