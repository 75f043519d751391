from __future__ import annotations

from ..extensions import db
from ..errors import ConflictError, NotFoundError, ValidationError
from ..models import Order, User
from ..permissions import Role
from ..validation import coerce_email, coerce_str
from .auth_service import hash_password
from .concurrency import lock_for_update, transaction


def _coerce_role(value) -> str:
    """Stored roles are the signed-in ones; anonymous is never assigned."""
    assignable = [role.value for role in Role if role is not Role.ANONYMOUS]
    if not isinstance(value, str) or value.strip().lower() not in assignable:
        raise ValidationError("role must be one of: " + ", ".join(assignable))
    return value.strip().lower()


def list_users() -> list[User]:
    return db.session.query(User).order_by(User.id.asc()).all()


def get_user(user_id: int) -> User:
    user = db.session.get(User, user_id)
    if user is None:
        raise NotFoundError("user not found")
    return user


def get_user_by_email(email) -> User:
    email = coerce_email(email)
    user = db.session.query(User).filter_by(email=email).first()
    if user is None:
        raise NotFoundError("user not found")
    return user


def create_user(*, email, password, name, surname=None, phone=None, role=Role.USER.value) -> User:
    """Admin-side account creation; unlike register() the role is chosen by the caller."""
    email = coerce_email(email)
    name = coerce_str(name, "name", max_length=100)
    surname = coerce_str(surname, "surname", required=False, max_length=100) or ""
    phone = coerce_str(phone, "phone", required=False, max_length=32)
    role = _coerce_role(role)
    password_hash = hash_password(password)

    with transaction():
        if db.session.query(User.id).filter_by(email=email).first():
            raise ConflictError("user already exists")

        user = User(
            email=email,
            name=name,
            surname=surname,
            phone=phone,
            role=role,
            password_hash=password_hash,
        )
        db.session.add(user)
    return user


def update_user(user_id: int, *, email=None, name=None, surname=None, phone=None, password=None) -> User:
    """Profile update. Role changes go through update_user_role()."""
    with transaction():
        user = lock_for_update(db.session.query(User).filter_by(id=user_id)).first()
        if user is None:
            raise NotFoundError("user not found")

        if email is not None:
            email = coerce_email(email)
            existing = db.session.query(User.id).filter_by(email=email).first()
            if existing is not None and existing.id != user.id:
                raise ConflictError("user already exists")
            user.email = email
        if name is not None:
            user.name = coerce_str(name, "name", max_length=100)
        if surname is not None:
            user.surname = coerce_str(surname, "surname", required=False, max_length=100) or ""
        if phone is not None:
            user.phone = coerce_str(phone, "phone", required=False, max_length=32)
        if password is not None:
            user.password_hash = hash_password(password)
    return user


def update_user_role(user_id: int, new_role) -> User:
    new_role = _coerce_role(new_role)

    with transaction():
        user = lock_for_update(db.session.query(User).filter_by(id=user_id)).first()
        if user is None:
            raise NotFoundError("user not found")
        user.role = new_role
    return user


def delete_user(user_id: int) -> None:
    with transaction():
        user = db.session.get(User, user_id)
        if user is None:
            raise NotFoundError("user not found")

        if db.session.query(Order.id).filter_by(user_id=user_id).first():
            raise ConflictError("user has orders")

        # Sessions go with the user (relationship cascade)
        db.session.delete(user)
