"""Book persistence operations.

Every function takes an ``AsyncSession`` and raises the errors from
``booktracker.errors``.
"""

import logging
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from typing import Any

from sqlalchemy import delete, select
from sqlalchemy.exc import DBAPIError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from booktracker.errors import NotFound, StoreUnavailable, ValidationError
from booktracker.models import Book

logger = logging.getLogger(__name__)

EDITABLE_FIELDS = ("title", "author")


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except DBAPIError as e:
        logger.error("Store error during %s: %s", operation, e)
        raise StoreUnavailable(f"Store error during {operation}") from e


def _clean_text(field: str, value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} must be a non-empty string")
    return value.strip()


async def list_books(session: AsyncSession) -> list[Book]:
    with _store_errors("list"):
        result = await session.execute(select(Book).order_by(Book.created_at, Book.id))
        return list(result.scalars().all())


async def get_book(session: AsyncSession, book_id: str) -> Book:
    with _store_errors("get"):
        book = await session.get(Book, book_id)
    if book is None:
        raise NotFound(book_id)
    return book


async def create_book(session: AsyncSession, title: Any, author: Any) -> Book:
    book = Book(title=_clean_text("title", title), author=_clean_text("author", author))
    with _store_errors("create"):
        session.add(book)
        await session.commit()
        await session.refresh(book)
    logger.info("Created book %s", book.id)
    return book


async def update_book(session: AsyncSession, book_id: str, fields: Mapping[str, Any]) -> Book:
    """Apply ``fields`` to the book; keys that are not supplied are left alone."""
    unknown = set(fields) - set(EDITABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")
    changes = {key: _clean_text(key, value) for key, value in fields.items()}

    book = await get_book(session, book_id)
    if not changes:
        return book
    for key, value in changes.items():
        setattr(book, key, value)
    try:
        with _store_errors("update"):
            await session.commit()
    except StaleDataError:
        # Deleted by another request between our lookup and the write.
        await session.rollback()
        raise NotFound(book_id) from None
    with _store_errors("update"):
        await session.refresh(book)
    logger.info("Updated book %s (%s)", book_id, ", ".join(sorted(changes)))
    return book


async def delete_book(session: AsyncSession, book_id: str) -> None:
    with _store_errors("delete"):
        result = await session.execute(delete(Book).where(Book.id == book_id))
        if result.rowcount == 0:
            await session.rollback()
            raise NotFound(book_id)
        await session.commit()
    logger.info("Deleted book %s", book_id)
