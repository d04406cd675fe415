"""In-process user and plan stores.

Both stores hold deep copies so callers never share state with them. There is
no coordination between writers: the last write for an owner wins.
"""
from __future__ import annotations

import uuid
from typing import Dict, Optional

from core.errors import DuplicatePlanError, PlanNotFoundError, UserNotFoundError
from schemas.learning import LearningPlanDocument
from schemas.user import UserRecord


class UserStore:
    def __init__(self) -> None:
        self._users: Dict[str, UserRecord] = {}

    def create(self, user: UserRecord) -> UserRecord:
        if not user.id:
            user = user.model_copy(update={"id": uuid.uuid4().hex})
        self._users[user.id] = user.model_copy(deep=True)
        return user

    def get(self, user_id: str) -> UserRecord:
        user = self._users.get(user_id)
        if user is None:
            raise UserNotFoundError(f"User '{user_id}' not found")
        return user.model_copy(deep=True)

    def update(self, user: UserRecord) -> UserRecord:
        if user.id not in self._users:
            raise UserNotFoundError(f"User '{user.id}' not found")
        self._users[user.id] = user.model_copy(deep=True)
        return user

    def delete(self, user_id: str) -> UserRecord:
        user = self._users.pop(user_id, None)
        if user is None:
            raise UserNotFoundError(f"User '{user_id}' not found")
        return user


class PlanStore:
    """At most one plan document per owner."""

    def __init__(self) -> None:
        self._plans: Dict[str, LearningPlanDocument] = {}

    def find_by_owner(self, owner: str) -> Optional[LearningPlanDocument]:
        doc = self._plans.get(owner)
        return doc.model_copy(deep=True) if doc is not None else None

    def insert(self, doc: LearningPlanDocument) -> LearningPlanDocument:
        if doc.owner in self._plans:
            raise DuplicatePlanError(f"User '{doc.owner}' already has a learning plan")
        self._plans[doc.owner] = doc.model_copy(deep=True)
        return doc

    def replace_by_owner(self, doc: LearningPlanDocument) -> LearningPlanDocument:
        if doc.owner not in self._plans:
            raise PlanNotFoundError(f"No learning plan for user '{doc.owner}'")
        self._plans[doc.owner] = doc.model_copy(deep=True)
        return doc

    def upsert_by_owner(self, doc: LearningPlanDocument) -> LearningPlanDocument:
        self._plans[doc.owner] = doc.model_copy(deep=True)
        return doc

    def delete_by_owner(self, owner: str) -> bool:
        return self._plans.pop(owner, None) is not None
