from .author import AuthorCreate, AuthorRead, AuthorWithBooksRead, Link
from .book import BookSummary

__all__ = ["AuthorCreate", "AuthorRead", "AuthorWithBooksRead", "BookSummary", "Link"]
