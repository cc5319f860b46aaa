import time
import uuid
from collections.abc import Generator
from datetime import date

import pytest
from fastapi.testclient import TestClient
from jwcrypto import jwk, jwt
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from authors_api.core.config import settings
from authors_api.db.session import get_db
from authors_api.main import app
from authors_api.models import Author, AuthorBook, Base, Book

API = settings.API_V1_STR

# In-memory database shared by the test thread and the app's threadpool
test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
    future=True,
)


@event.listens_for(test_engine, "connect")
def _enable_foreign_keys(dbapi_connection, _connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestSessionLocal = sessionmaker(bind=test_engine, autocommit=False, autoflush=False, future=True)


def override_get_db() -> Generator[Session, None, None]:
    db = TestSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(autouse=True)
def setup_test_database():
    """Fresh schema for every test."""
    Base.metadata.create_all(bind=test_engine)
    app.dependency_overrides[get_db] = override_get_db
    yield
    app.dependency_overrides.clear()
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def db_session():
    """Session for repository/service tests and for seeding."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture
def test_client():
    """Create a test client for FastAPI app."""
    return TestClient(app)


def make_token(claims: dict[str, object], secret: str | None = None) -> str:
    key = jwk.JWK.from_password(secret or settings.JWT_SECRET)
    token = jwt.JWT(header={"alg": "HS256"}, claims=claims)
    token.make_signed_token(key)
    return token.serialize()


@pytest.fixture
def admin_token() -> str:
    return make_token(
        {"sub": "admin@example.com", settings.ADMIN_CLAIM: "1", "exp": int(time.time()) + 600}
    )


@pytest.fixture
def user_token() -> str:
    return make_token({"sub": "reader@example.com", "exp": int(time.time()) + 600})


@pytest.fixture
def admin_headers(admin_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def user_headers(user_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {user_token}"}


@pytest.fixture
def sample_author(test_client, admin_headers):
    """Create a sample author through the API."""
    unique_suffix = str(uuid.uuid4())[:8]
    response = test_client.post(
        f"{API}/authors",
        json={"name": f"Test Author {unique_suffix}"},
        headers=admin_headers,
    )
    assert response.status_code == 201, f"Failed to create sample author: {response.text}"
    return response.json()


def link_books(author_id: int, titles: list[tuple[str, date | None, int]]) -> list[int]:
    """Insert books and link them to an author; returns the new book ids."""
    with TestSessionLocal() as session:
        book_ids: list[int] = []
        for title, published_at, position in titles:
            book = Book(title=title, published_at=published_at)
            session.add(book)
            session.flush()
            session.add(AuthorBook(author_id=author_id, book_id=book.id, position=position))
            book_ids.append(book.id)
        session.commit()
        return book_ids


@pytest.fixture
def sample_author_model(db_session: Session) -> Author:
    """Author row inserted directly, for repository tests."""
    author = Author(name=f"Model Author {uuid.uuid4().hex[:8]}")
    db_session.add(author)
    db_session.commit()
    db_session.refresh(author)
    return author


@pytest.fixture
def token_factory():
    return make_token


@pytest.fixture
def book_linker():
    return link_books
