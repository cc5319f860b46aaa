import pytest
from fastapi import status

from authors_api.core.config import settings
from authors_api.schemas.author import AuthorWithBooksRead
from authors_api.services.hateoas import enrich_author, wants_links

API = settings.API_V1_STR
LINKS_ON = {settings.HATEOAS_HEADER: "Y"}


@pytest.mark.parametrize("value", ["Y", "y", "yes", "TRUE", " 1 "])
def test_wants_links_truthy(value):
    assert wants_links(value) is True


@pytest.mark.parametrize("value", [None, "", "N", "false", "0", "maybe"])
def test_wants_links_falsy(value):
    assert wants_links(value) is False


def test_enrich_without_flag_returns_dto_untouched():
    dto = AuthorWithBooksRead(id=1, name="Jane Doe", books=[])

    result = enrich_author(dto, request=None, principal=None, include=False)

    assert result is dto
    assert result.links is None


class TestAuthorLinks:
    """Hypermedia links on the single author response."""

    def test_no_header_no_links(self, test_client, admin_headers, sample_author):
        response = test_client.get(
            f"{API}/authors/{sample_author['id']}", headers=admin_headers
        )

        assert response.status_code == status.HTTP_200_OK
        assert "links" not in response.json()

    def test_header_false_no_links(self, test_client, sample_author):
        response = test_client.get(
            f"{API}/authors/{sample_author['id']}",
            headers={settings.HATEOAS_HEADER: "N"},
        )

        assert "links" not in response.json()

    def test_anonymous_gets_only_self(self, test_client, sample_author):
        author_id = sample_author["id"]

        response = test_client.get(f"{API}/authors/{author_id}", headers=LINKS_ON)

        links = response.json()["links"]
        assert links == [
            {
                "rel": "self",
                "href": f"http://testserver{API}/authors/{author_id}",
                "method": "GET",
            }
        ]

    def test_non_admin_gets_only_self(self, test_client, user_headers, sample_author):
        response = test_client.get(
            f"{API}/authors/{sample_author['id']}",
            headers={**user_headers, **LINKS_ON},
        )

        assert [link["rel"] for link in response.json()["links"]] == ["self"]

    def test_admin_gets_write_links(self, test_client, admin_headers, sample_author):
        author_id = sample_author["id"]

        response = test_client.get(
            f"{API}/authors/{author_id}",
            headers={**admin_headers, **LINKS_ON},
        )

        links = {link["rel"]: link for link in response.json()["links"]}
        assert set(links) == {"self", "update-author", "delete-author"}
        assert links["update-author"]["method"] == "PUT"
        assert links["delete-author"]["method"] == "DELETE"
        assert links["delete-author"]["href"].endswith(f"{API}/authors/{author_id}")

    def test_links_not_added_to_missing_author(self, test_client):
        response = test_client.get(f"{API}/authors/999", headers=LINKS_ON)

        assert response.status_code == status.HTTP_404_NOT_FOUND
