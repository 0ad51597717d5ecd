"""
Book Reader Backend

Bookshelf, reader sessions and text highlights for plain-text and PDF books.
"""

__version__ = "1.0.0"
