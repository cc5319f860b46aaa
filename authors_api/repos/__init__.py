from .author_repo import AuthorRepository, AuthorWithBooks

__all__ = ["AuthorRepository", "AuthorWithBooks"]
