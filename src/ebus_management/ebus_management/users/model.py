from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ..core.enums import Role


@dataclass(frozen=True)
class User:
    """Domain entity: account of a passenger, driver or admin.

    Note: plain data object; ``version`` is the store's write counter and is
    never serialized into the record.
    """

    id: str
    full_name: str
    email: str
    role: Role
    phone: Optional[str] = None
    password_hash: Optional[str] = None
    is_active: bool = True
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    deleted_at: Optional[str] = None
    last_login: Optional[str] = None
    created_by: Optional[str] = None
    deleted_by: Optional[str] = None
    version: int = 0

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "fullName": self.full_name,
            "email": self.email,
            "phone": self.phone,
            "role": self.role.value,
            "passwordHash": self.password_hash,
            "isActive": self.is_active,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
            "deletedAt": self.deleted_at,
            "lastLogin": self.last_login,
            "createdBy": self.created_by,
            "deletedBy": self.deleted_by,
        }

    def to_public(self) -> dict:
        data = self.to_record()
        data.pop("passwordHash")
        return data

    @classmethod
    def from_record(cls, data: dict, *, version: int = 0) -> "User":
        return cls(
            id=str(data["id"]),
            full_name=data.get("fullName") or "",
            email=data.get("email") or "",
            phone=data.get("phone"),
            role=Role(data.get("role") or Role.USER.value),
            password_hash=data.get("passwordHash"),
            # Records written before soft delete existed carry no flag.
            is_active=data.get("isActive") is not False,
            created_at=data.get("createdAt"),
            updated_at=data.get("updatedAt"),
            deleted_at=data.get("deletedAt"),
            last_login=data.get("lastLogin"),
            created_by=data.get("createdBy"),
            deleted_by=data.get("deletedBy"),
            version=version,
        )


@dataclass(frozen=True)
class SessionUser:
    """Authenticated identity passed explicitly into every operation."""

    user_id: str
    email: str
    full_name: str
    role: Role

    def to_dict(self) -> dict[str, Any]:
        return {
            "uid": self.user_id,
            "email": self.email,
            "fullName": self.full_name,
            "role": self.role.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SessionUser":
        return cls(
            user_id=str(data["uid"]),
            email=data.get("email") or "",
            full_name=data.get("fullName") or "",
            role=Role(data.get("role") or Role.USER.value),
        )

    @classmethod
    def for_user(cls, user: User) -> "SessionUser":
        return cls(user_id=user.id, email=user.email, full_name=user.full_name, role=user.role)
