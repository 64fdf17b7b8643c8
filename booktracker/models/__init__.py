from booktracker.models.book import Book

__all__ = ["Book"]
