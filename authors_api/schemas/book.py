from pydantic import BaseModel, ConfigDict
from typing import ClassVar
from datetime import date

# Book as listed under an author
class BookSummary(BaseModel):
    id: int
    title: str
    published_at: date | None = None

    model_config: ClassVar[ConfigDict] = ConfigDict(from_attributes=True)
