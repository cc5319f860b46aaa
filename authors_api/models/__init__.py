from .author import Author
from .base import Base
from .book import AuthorBook, Book

__all__ = ["Author", "AuthorBook", "Base", "Book"]
