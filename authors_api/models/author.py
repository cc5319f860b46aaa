from sqlalchemy import Integer, Text, Index
from sqlalchemy.orm import Mapped, mapped_column
from authors_api.models.base import Base

#Author
class Author(Base):
    __tablename__: str = "authors"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False)

    # Backstop for the exists-then-insert check in AuthorService.create_author
    __table_args__: tuple[Index, ...] = (
        Index("uq_authors_name", "name", unique=True),
    )
