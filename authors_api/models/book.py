import datetime
from sqlalchemy import ForeignKey, Integer, Date, Text
from sqlalchemy.orm import Mapped, mapped_column
from authors_api.models.base import Base

#Book
class Book(Base):
    __tablename__: str = "books"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    published_at: Mapped[datetime.date | None] = mapped_column(Date, nullable=True)


#Author <-> Book link, owned by the book catalogue
class AuthorBook(Base):
    __tablename__: str = "authors_books"

    author_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("authors.id", ondelete="CASCADE"),
        primary_key=True,
    )
    book_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("books.id", ondelete="CASCADE"),
        primary_key=True,
    )
    position: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        server_default="0",
        comment="order of the author in the book credits",
    )
