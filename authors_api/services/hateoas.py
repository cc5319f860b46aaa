from fastapi import Request

from authors_api.core.security import Policy, Principal, Decision, evaluate
from authors_api.schemas.author import AuthorWithBooksRead, Link

_TRUTHY = frozenset({"y", "yes", "true", "1"})


def wants_links(header_value: str | None) -> bool:
    """Interpret the link-request header; anything but a truthy token means no links."""
    if header_value is None:
        return False
    return header_value.strip().lower() in _TRUTHY


def author_links(request: Request, author_id: int, principal: Principal | None) -> list[Link]:
    # Only advertise what the caller may actually call
    links = [
        Link(rel="self", href=str(request.url_for("get_author", author_id=author_id)), method="GET"),
    ]
    if evaluate(principal, Policy.ADMINISTRATOR) is Decision.ALLOWED:
        links.append(
            Link(
                rel="update-author",
                href=str(request.url_for("update_author", author_id=author_id)),
                method="PUT",
            )
        )
        links.append(
            Link(
                rel="delete-author",
                href=str(request.url_for("delete_author", author_id=author_id)),
                method="DELETE",
            )
        )
    return links


def enrich_author(
    dto: AuthorWithBooksRead,
    request: Request,
    principal: Principal | None,
    include: bool,
) -> AuthorWithBooksRead:
    if not include:
        return dto
    dto.links = author_links(request, dto.id, principal)
    return dto
