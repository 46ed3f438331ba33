"""
The reset / seed / list / clear / list flow and its console listing.
"""

from __future__ import annotations

from typing import Callable, Iterable

from tagclear.domain.records import TagRecord, UserRecord
from tagclear.repositories.sql_repository import SQLRepository

RESET_MESSAGE = "The database has been reset."
SEED_USER = "John Doe"
SEED_TAGS = ("A", "B", "C")


def format_listing(users: Iterable[UserRecord]) -> list[str]:
    """Render users and their loaded tags, one line each."""
    lines: list[str] = []
    for user in users:
        lines.append(f"{user.name} ({user.id})")
        if not user.tags_loaded:
            continue
        for tag in user.tags:
            lines.append(f" - {tag.name} ({tag.id})")
    return lines


class DemoService:
    """Runs the collection-clear demo against a repository."""

    def __init__(self, repository: SQLRepository | None = None, emit: Callable[[str], None] = print) -> None:
        self.repository = repository or SQLRepository()
        self.emit = emit

    def reset(self) -> None:
        self.repository.reset_schema()
        self.emit(RESET_MESSAGE)

    def seed(self) -> UserRecord:
        user = UserRecord(name=SEED_USER, tags=[TagRecord(name=name) for name in SEED_TAGS])
        self.repository.save(user)
        return user

    def show(self) -> list[str]:
        lines = format_listing(self.repository.list_users(include_tags=True))
        for line in lines:
            self.emit(line)
        return lines

    def clear_tags(self, materialize: bool = False) -> UserRecord:
        """Replace the single user's tags with an empty collection and save.

        With ``materialize`` the tags are loaded before being replaced;
        otherwise the collection is replaced without ever being populated.
        """
        user = self.repository.get_single_user(include_tags=materialize)
        user.tags = []
        self.repository.save(user)
        return user

    def run(self, materialize: bool = False) -> tuple[list[str], list[str]]:
        """Run the whole flow; returns the listing before and after the clear."""
        self.reset()
        self.seed()
        before = self.show()
        self.clear_tags(materialize=materialize)
        after = self.show()
        return before, after
