"""
Explicit projections between storage entities and API schemas.

Nothing here touches the session; every field transfer is spelled out.
"""
from collections.abc import Iterable

from authors_api.models.author import Author
from authors_api.models.book import Book
from authors_api.schemas.author import AuthorCreate, AuthorRead, AuthorWithBooksRead
from authors_api.schemas.book import BookSummary


def to_author_read(author: Author) -> AuthorRead:
    return AuthorRead(id=author.id, name=author.name)


def to_book_summary(book: Book) -> BookSummary:
    return BookSummary(id=book.id, title=book.title, published_at=book.published_at)


def to_author_with_books(author: Author, books: Iterable[Book]) -> AuthorWithBooksRead:
    # links stay unset so they are omitted unless the enricher adds them
    return AuthorWithBooksRead(
        id=author.id,
        name=author.name,
        books=[to_book_summary(book) for book in books],
    )


def from_author_create(data: AuthorCreate) -> Author:
    """Build an unsaved entity; the id is assigned by storage (or forced by the caller)."""
    return Author(name=data.name)
