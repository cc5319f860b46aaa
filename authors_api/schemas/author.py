from pydantic import BaseModel, Field, field_validator, ConfigDict
from typing import ClassVar

from authors_api.schemas.book import BookSummary

# Author input schema (create and full replace)
class AuthorCreate(BaseModel):
    name: str = Field(max_length=120)

    @field_validator("name", mode="before")
    @classmethod
    def trim_and_check(cls, v: object) -> object:
        if not isinstance(v, str):
            return v
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty")
        return v

# Author read schema
class AuthorRead(BaseModel):
    id: int
    name: str

    model_config: ClassVar[ConfigDict] = ConfigDict(from_attributes=True)

# Hypermedia link
class Link(BaseModel):
    rel: str
    href: str
    method: str

# Author read schema with linked books
class AuthorWithBooksRead(AuthorRead):
    books: list[BookSummary] = []
    links: list[Link] | None = None
