from __future__ import annotations
from typing import NamedTuple
from typing import cast
from sqlalchemy import select, update, delete, exists
from sqlalchemy.engine import CursorResult
from sqlalchemy.orm import Session

from authors_api.models.author import Author
from authors_api.models.book import AuthorBook, Book


class AuthorWithBooks(NamedTuple):
    author: Author
    books: list[Book]


class AuthorRepository:
    """Storage gateway for authors. Every call takes the request's session explicitly."""

    @staticmethod
    # List authors in insertion order
    def list(db: Session) -> list[Author]:
        stmt = select(Author).order_by(Author.id.asc())
        return list(db.scalars(stmt).all())

    @staticmethod
    # Get an author by ID
    def get(db: Session, author_id: int) -> Author | None:
        return db.get(Author, author_id)

    @staticmethod
    # Get an author together with its linked books
    def get_with_books(db: Session, author_id: int) -> AuthorWithBooks | None:
        author = db.get(Author, author_id)
        if author is None:
            return None

        stmt = (
            select(Book)
            .join(AuthorBook, AuthorBook.book_id == Book.id)
            .where(AuthorBook.author_id == author_id)
            .order_by(AuthorBook.position.asc(), Book.id.asc())
        )
        return AuthorWithBooks(author, list(db.scalars(stmt).all()))

    @staticmethod
    # Search authors whose name contains a fragment
    def search_by_name(db: Session, fragment: str) -> list[Author]:
        stmt = (
            select(Author)
            .where(Author.name.icontains(fragment, autoescape=True))
            .order_by(Author.id.asc())
        )
        return list(db.scalars(stmt).all())

    @staticmethod
    def exists_by_name(db: Session, name: str) -> bool:
        return bool(db.scalar(select(exists().where(Author.name == name))))

    @staticmethod
    def exists_by_id(db: Session, author_id: int) -> bool:
        return bool(db.scalar(select(exists().where(Author.id == author_id))))

    @staticmethod
    # Create a new author
    def create(db: Session, author: Author) -> Author:
        db.add(author)
        db.commit()
        db.refresh(author)
        return author

    @staticmethod
    # Replace every column of an existing author; returns the number of rows changed
    def replace(db: Session, author: Author) -> int:
        stmt = update(Author).where(Author.id == author.id).values(name=author.name)
        result = cast(CursorResult[object], db.execute(stmt))
        db.commit()
        return result.rowcount

    @staticmethod
    # Delete an author; author/book links cascade in the database
    def delete(db: Session, author_id: int) -> None:
        _ = db.execute(delete(Author).where(Author.id == author_id))
        db.commit()
