"""readpub - web articles to reader-optimized e-books."""

__version__ = "0.1.0"
