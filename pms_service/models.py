"""Modelo del documento 'users' y el almacén de credenciales sobre MongoDB."""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import BaseModel, Field
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

logger = logging.getLogger(__name__)


class DuplicateKey(Exception):
    """El email o el username ya pertenecen a otro usuario."""


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class User(BaseModel):
    """
    Documento de la colección 'users'.
    El campo 'password' siempre contiene el hash bcrypt, nunca el texto plano.
    """
    id: Optional[str] = None
    username: str
    email: str
    password: str
    firstName: Optional[str] = None
    lastName: Optional[str] = None
    phoneNumber: Optional[str] = None
    createdAt: datetime = Field(default_factory=_utcnow)
    updatedAt: datetime = Field(default_factory=_utcnow)

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "User":
        data = dict(doc)
        data["id"] = str(data.pop("_id"))
        return cls(**data)

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(exclude={"id"})


class UserStore:
    """Operaciones de un solo documento sobre la colección de usuarios."""

    def __init__(self, collection: Collection):
        self.collection = collection

    def find_by_email(self, email: str) -> Optional[User]:
        doc = self.collection.find_one({"email": email})
        return User.from_document(doc) if doc else None

    def find_by_id(self, user_id: str) -> Optional[User]:
        try:
            oid = ObjectId(user_id)
        except (InvalidId, TypeError):
            logger.warning(f"ID de usuario con formato inválido: {user_id!r}")
            return None
        doc = self.collection.find_one({"_id": oid})
        return User.from_document(doc) if doc else None

    def create(self, username: str, email: str, password_hash: str, **profile: Optional[str]) -> User:
        """
        Inserta un usuario nuevo. 'password_hash' ya debe venir hasheado.

        Lanza DuplicateKey si el email o el username ya existen.
        """
        user = User(username=username, email=email, password=password_hash, **profile)
        try:
            result = self.collection.insert_one(user.to_document())
        except DuplicateKeyError as e:
            raise DuplicateKey(str(e)) from e
        user.id = str(result.inserted_id)
        logger.info(f"Usuario creado con ID: {user.id} para email: {email}")
        return user

    def save(self, user: User) -> User:
        """Persiste los cambios de un usuario existente y actualiza 'updatedAt'."""
        user.updatedAt = _utcnow()
        try:
            self.collection.replace_one({"_id": ObjectId(user.id)}, user.to_document())
        except DuplicateKeyError as e:
            raise DuplicateKey(str(e)) from e
        return user
