"""View state for the book tracker client.

Holds the list of books, the two form fields and the id of the book being
edited, if any. The list is a local copy and is never reconciled against
the server after a delete.
"""

import logging
from dataclasses import dataclass, field

from booktracker.client.api import ApiError, BookTrackerClient

logger = logging.getLogger(__name__)


@dataclass
class TrackerState:
    client: BookTrackerClient
    books: list[dict] = field(default_factory=list)
    title: str = ""
    author: str = ""
    editing_id: str | None = None

    @property
    def submit_label(self) -> str:
        return "Update Book" if self.editing_id else "Add Book"

    async def mount(self) -> None:
        try:
            self.books = await self.client.list_books()
        except ApiError as e:
            logger.error("Failed to load books: %s", e)
            self.books = []

    async def submit(self) -> dict | None:
        """Create or update from the form. Returns the saved book, or None."""
        if not self.title.strip() or not self.author.strip():
            return None

        saved = None
        try:
            if self.editing_id:
                saved = await self.client.update_book(self.editing_id, title=self.title, author=self.author)
                self.books = [saved if b["id"] == self.editing_id else b for b in self.books]
                self.editing_id = None
            else:
                saved = await self.client.create_book(self.title, self.author)
                self.books = [*self.books, saved]
        except ApiError as e:
            logger.error("Error saving book: %s", e)

        self.title = ""
        self.author = ""
        return saved

    def edit(self, book: dict) -> None:
        self.title = book["title"]
        self.author = book["author"]
        self.editing_id = book["id"]

    def cancel_edit(self) -> None:
        self.title = ""
        self.author = ""
        self.editing_id = None

    async def delete(self, book_id: str) -> bool:
        try:
            await self.client.delete_book(book_id)
        except ApiError as e:
            logger.error("Error deleting book: %s", e)
            return False
        self.books = [b for b in self.books if b["id"] != book_id]
        return True
