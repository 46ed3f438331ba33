"""High-level data access helpers backed by SQLAlchemy."""
from __future__ import annotations

import logging
from typing import Any, Optional

from sqlalchemy import delete, func, select, update
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, selectinload

from tagclear.core.config import get_settings
from tagclear.core.errors import ConnectionFailure, ConstraintViolation, NotFound
from tagclear.db.create_tables import create_all, drop_and_create_all
from tagclear.db.models import Tag, User
from tagclear.db.session import get_session
from tagclear.domain.reconcile import ReconcilePlan, ReconcilePolicy, get_policy
from tagclear.domain.records import NOT_LOADED, TagRecord, UserRecord

logger = logging.getLogger(__name__)


def _to_tag_record(entity: Tag) -> TagRecord:
    return TagRecord(name=entity.name, id=entity.id, user_id=entity.user_id)


def _to_user_record(entity: User, include_tags: bool) -> UserRecord:
    tags = [_to_tag_record(tag) for tag in entity.tags] if include_tags else NOT_LOADED
    record = UserRecord(name=entity.name, tags=tags, id=entity.id)
    record.mark_loaded()
    return record


class SQLRepository:
    """Persistence façade over users and their tags.

    Every call opens its own session; nothing is cached between calls. Records
    returned are detached dataclasses, and changes to them reach the database
    only through ``save``.
    """

    def __init__(self, policy: str | ReconcilePolicy | None = None) -> None:
        if policy is None:
            policy = get_settings().unloaded_collection_policy
        self.policy: ReconcilePolicy = get_policy(policy) if isinstance(policy, str) else policy

    # -------------------------- schema --------------------------
    def reset_schema(self) -> None:
        try:
            drop_and_create_all()
        except OperationalError as exc:
            raise ConnectionFailure(f"Database unavailable: {exc.orig}") from exc

    def create_schema(self) -> None:
        try:
            create_all()
        except OperationalError as exc:
            raise ConnectionFailure(f"Database unavailable: {exc.orig}") from exc

    # -------------------------- users --------------------------
    def list_users(self, include_tags: bool = False) -> list[UserRecord]:
        with get_session() as session:
            stmt = select(User).order_by(User.id)
            if include_tags:
                stmt = stmt.options(selectinload(User.tags))
            rows = session.execute(stmt).scalars().all()
            return [_to_user_record(row, include_tags) for row in rows]

    def get_user(self, user_id: int, include_tags: bool = False) -> UserRecord:
        with get_session() as session:
            stmt = select(User).where(User.id == user_id)
            if include_tags:
                stmt = stmt.options(selectinload(User.tags))
            row = session.execute(stmt).scalar_one_or_none()
            if row is None:
                raise NotFound(f"User {user_id} does not exist")
            return _to_user_record(row, include_tags)

    def get_single_user(self, include_tags: bool = False) -> UserRecord:
        """Return the only user in the store; anything else is NotFound."""
        with get_session() as session:
            stmt = select(User).order_by(User.id).limit(2)
            if include_tags:
                stmt = stmt.options(selectinload(User.tags))
            rows = session.execute(stmt).scalars().all()
            if not rows:
                raise NotFound("Expected exactly one user, found none")
            if len(rows) > 1:
                raise NotFound("Expected exactly one user, found more than one")
            return _to_user_record(rows[0], include_tags)

    def delete_user(self, user_id: int) -> None:
        with get_session() as session:
            row = session.get(User, user_id)
            if row is None:
                raise NotFound(f"User {user_id} does not exist")
            session.delete(row)
            session.commit()
        logger.info("Deleted user %s", user_id)

    # -------------------------- tags --------------------------
    def add_tag(self, user_id: int, name: str) -> TagRecord:
        with get_session() as session:
            if session.get(User, user_id) is None:
                raise ConstraintViolation(f"Cannot add tag {name!r}: user {user_id} does not exist")
            entity = Tag(name=name, user_id=user_id)
            session.add(entity)
            session.commit()
            return _to_tag_record(entity)

    def count_tags(self, user_id: Optional[int] = None) -> int:
        with get_session() as session:
            stmt = select(func.count(Tag.id))
            if user_id is not None:
                stmt = stmt.where(Tag.user_id == user_id)
            return int(session.execute(stmt).scalar_one())

    # -------------------------- save --------------------------
    def save(self, *users: UserRecord) -> list[UserRecord]:
        """Insert or update the given users and their populated tag collections.

        Repeated records are saved once, and a tag listed under two users is a
        ConstraintViolation. Everything is written in one transaction: user rows
        first, then tag inserts and updates, then tag deletes, so a tag moved
        between two users saved together is re-parented before its old owner
        drops it. Generated ids are copied back onto the records only after the
        commit succeeds.
        """
        unique: dict[int, UserRecord] = {}
        for user in users:
            unique.setdefault(id(user), user)
        users = tuple(unique.values())

        assigned: list[tuple[Any, dict[str, Any]]] = []
        claimed: dict[tuple[str, int], UserRecord] = {}
        with get_session() as session:
            plans = [self._save_user(session, user, assigned, claimed) for user in users]
            for user_id, plan in plans:
                if plan is not None:
                    self._apply_writes(session, user_id, plan, assigned)
            for user_id, plan in plans:
                if plan is not None and plan.deletes:
                    session.execute(
                        delete(Tag)
                        .where(Tag.user_id == user_id, Tag.id.in_(sorted(plan.deletes)))
                        .execution_options(synchronize_session=False)
                    )
            session.commit()

        for record, values in assigned:
            for attr, value in values.items():
                setattr(record, attr, value)
        for user in users:
            user.mark_loaded()
        logger.info("Saved %d user(s)", len(users))
        return list(users)

    def _save_user(
        self,
        session: Session,
        user: UserRecord,
        assigned: list,
        claimed: dict[tuple[str, int], UserRecord],
    ) -> tuple[int, Optional[ReconcilePlan]]:
        if user.id is None:
            row = User(name=user.name)
            session.add(row)
            session.flush()
            assigned.append((user, {"id": row.id}))
        else:
            row = session.get(User, user.id)
            if row is None:
                raise NotFound(f"User {user.id} does not exist")
            row.name = user.name
        user_id = row.id

        if not user.tags_loaded:
            return user_id, None

        def fetch_persisted() -> list[int]:
            stmt = select(Tag.id).where(Tag.user_id == user_id)
            return list(session.execute(stmt).scalars().all())

        plan = self.policy(user.previous_tag_ids(), user.tags, fetch_persisted=fetch_persisted)
        logger.debug(
            "User %s: deleting %d tag(s), inserting %d, updating %d",
            user_id,
            len(plan.deletes),
            len(plan.inserts),
            len(plan.updates),
        )
        for tag in (*plan.inserts, *plan.updates):
            key = ("row", tag.id) if tag.id is not None else ("record", id(tag))
            owner = claimed.setdefault(key, user)
            if owner is not user:
                raise ConstraintViolation(f"Tag {tag.name!r} is listed under more than one user")
        return user_id, plan

    def _apply_writes(self, session: Session, user_id: int, plan: ReconcilePlan, assigned: list) -> None:
        for tag in plan.updates:
            result = session.execute(
                update(Tag)
                .where(Tag.id == tag.id)
                .values(name=tag.name, user_id=user_id)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                raise ConstraintViolation(f"Tag {tag.id} does not exist")
            assigned.append((tag, {"user_id": user_id}))
        for tag in plan.inserts:
            entity = Tag(name=tag.name, user_id=user_id)
            session.add(entity)
            session.flush()
            assigned.append((tag, {"id": entity.id, "user_id": user_id}))
