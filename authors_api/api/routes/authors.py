from fastapi import APIRouter, Depends, Header, Request, Response
from sqlalchemy.orm import Session
from typing import Annotated
from starlette.convertors import Convertor, register_url_convertor
from starlette.status import (
    HTTP_200_OK,
    HTTP_201_CREATED,
    HTTP_204_NO_CONTENT,
)

from authors_api.core.config import settings
from authors_api.core.logging import get_logger
from authors_api.core.security import Policy, Principal, get_principal, require_route_policy
from authors_api.db.session import get_db
from authors_api.schemas.author import AuthorCreate, AuthorRead, AuthorWithBooksRead
from authors_api.services.author_service import AuthorService
from authors_api.services.hateoas import enrich_author, wants_links


class SignedIntConvertor(Convertor):
    """Path ids may be negative; they simply match no author."""

    regex = "-?[0-9]+"

    def convert(self, value: str) -> int:
        return int(value)

    def to_string(self, value: int) -> str:
        return str(int(value))


register_url_convertor("sint", SignedIntConvertor())

# Every route requires the administrator policy unless listed otherwise
AUTHOR_ROUTE_POLICIES: dict[str, Policy] = {
    "get_author": Policy.ANONYMOUS,
}

router = APIRouter(
    prefix="/authors",
    tags=["authors"],
    dependencies=[Depends(require_route_policy(AUTHOR_ROUTE_POLICIES))],
)


@router.get("", name="list_authors", response_model=list[AuthorRead])
def list_authors(
    request: Request,
    db: Annotated[Session, Depends(get_db)],
):
    logger = get_logger(__name__, request)
    logger.info("Listing authors")
    return AuthorService.list_authors(db)


# Registered before the name search so numeric segments resolve here
@router.get(
    "/{author_id:sint}",
    name="get_author",
    response_model=AuthorWithBooksRead,
    response_model_exclude_unset=True,
)
def get_author(
    request: Request,
    author_id: int,
    db: Annotated[Session, Depends(get_db)],
    principal: Annotated[Principal | None, Depends(get_principal)],
    include_links: Annotated[str | None, Header(alias=settings.HATEOAS_HEADER)] = None,
):
    dto = AuthorService.get_author(db, author_id)
    return enrich_author(dto, request, principal, wants_links(include_links))


@router.get("/{name}", name="search_authors", response_model=list[AuthorRead])
def search_authors(
    name: str,
    db: Annotated[Session, Depends(get_db)],
):
    return AuthorService.search_authors(db, name)


@router.post(
    "",
    name="create_author",
    response_model=AuthorRead,
    status_code=HTTP_201_CREATED,
)
def create_author(
    request: Request,
    response: Response,
    data: AuthorCreate,
    db: Annotated[Session, Depends(get_db)],
):
    author = AuthorService.create_author(db, data)
    response.headers["Location"] = str(request.url_for("get_author", author_id=author.id))
    return author


@router.put("/{author_id:sint}", name="update_author", status_code=HTTP_204_NO_CONTENT)
def update_author(
    author_id: int,
    data: AuthorCreate,
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    AuthorService.update_author(db, author_id, data)
    return Response(status_code=HTTP_204_NO_CONTENT)


@router.delete("/{author_id:sint}", name="delete_author", status_code=HTTP_200_OK)
def delete_author(
    author_id: int,
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    AuthorService.delete_author(db, author_id)
    return Response(status_code=HTTP_200_OK)
