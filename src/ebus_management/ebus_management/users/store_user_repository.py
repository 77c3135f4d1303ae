from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Collection, Role
from ..storage.record_repository import StoreRecordRepository
from .model import User
from .repository import UserRepository


class StoreUserRepository(StoreRecordRepository[User], UserRepository):
    collection = Collection.USERS
    from_record = User.from_record

    def get_by_id(self, user_id: str) -> Optional[User]:
        return self._load(user_id)

    def get_by_email(self, email: str) -> Optional[User]:
        needle = (email or "").strip().lower()
        for user in self._load_all():
            if user.email.strip().lower() == needle:
                return user
        return None

    def list_all(self, *, role: Optional[Role] = None) -> Sequence[User]:
        users = self._load_all()
        if role is not None:
            users = [u for u in users if u.role == role]
        return users

    def save(self, user: User) -> User:
        return self._save(user)
