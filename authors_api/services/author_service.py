from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError

from authors_api.core.errors import DuplicateName, NotFound
from authors_api.core.logging import get_logger
from authors_api.mappers.author_mapper import (
    from_author_create,
    to_author_read,
    to_author_with_books,
)
from authors_api.repos.author_repo import AuthorRepository
from authors_api.schemas.author import AuthorCreate, AuthorRead, AuthorWithBooksRead

logger = get_logger(__name__)

# authors.id is a 32-bit integer column
_ID_MIN = -(2**31)
_ID_MAX = 2**31 - 1


def _require_storable_id(author_id: int) -> None:
    # Ids outside the column range cannot exist; stop before the driver rejects them
    if not _ID_MIN <= author_id <= _ID_MAX:
        raise NotFound(f"Author {author_id} not found")


class AuthorService:
    @staticmethod
    # List authors
    def list_authors(db: Session) -> list[AuthorRead]:
        return [to_author_read(a) for a in AuthorRepository.list(db)]

    @staticmethod
    # Get one author with its books
    def get_author(db: Session, author_id: int) -> AuthorWithBooksRead:
        _require_storable_id(author_id)
        found = AuthorRepository.get_with_books(db, author_id)
        if found is None:
            raise NotFound(f"Author {author_id} not found")
        return to_author_with_books(found.author, found.books)

    @staticmethod
    # Search authors by name fragment
    def search_authors(db: Session, name: str) -> list[AuthorRead]:
        return [to_author_read(a) for a in AuthorRepository.search_by_name(db, name)]

    @staticmethod
    # Create author
    def create_author(db: Session, data: AuthorCreate) -> AuthorRead:
        if AuthorRepository.exists_by_name(db, data.name):
            raise DuplicateName(data.name)

        try:
            author = AuthorRepository.create(db, from_author_create(data))
        except IntegrityError as e:
            # A concurrent create won the race to the unique index
            db.rollback()
            raise DuplicateName(data.name) from e

        logger.info("Created author %s", author.id)
        return to_author_read(author)

    @staticmethod
    # Replace author
    def update_author(db: Session, author_id: int, data: AuthorCreate) -> None:
        _require_storable_id(author_id)
        if not AuthorRepository.exists_by_id(db, author_id):
            raise NotFound(f"Author {author_id} not found")

        author = from_author_create(data)
        author.id = author_id

        try:
            changed = AuthorRepository.replace(db, author)
        except IntegrityError as e:
            db.rollback()
            raise DuplicateName(data.name) from e

        if changed == 0:
            # Deleted by another request after the existence check
            raise NotFound(f"Author {author_id} not found")

        logger.info("Replaced author %s", author_id)

    @staticmethod
    # Delete author
    def delete_author(db: Session, author_id: int) -> None:
        _require_storable_id(author_id)
        if not AuthorRepository.exists_by_id(db, author_id):
            raise NotFound(f"Author {author_id} not found")

        AuthorRepository.delete(db, author_id)
        logger.info("Deleted author %s", author_id)
