# Overview: Service-layer operations for auth; encapsulates business logic and database work.

"""
Authentication Service

Registration, credential checks, and password changes. Passwords are hashed
with bcrypt; the cost factor comes from BCRYPT_ROUNDS in the app config.

Session tokens are managed separately (see session_service.py).
"""

import bcrypt
from flask import current_app

from ..extensions import db
from ..errors import ConflictError, NotFoundError, ValidationError
from ..models import User
from ..permissions import Role
from ..validation import coerce_email, coerce_str
from .concurrency import transaction


MIN_PASSWORD_LENGTH = 6


class PasswordValidationError(ValidationError):
    """Raised when password doesn't meet strength requirements."""
    pass


def validate_password_strength(password) -> None:
    """
    Validate password meets strength requirements.

    Requirements:
    - Must be a string
    - Minimum 6 characters

    Raises PasswordValidationError if requirements not met.
    """
    if not isinstance(password, str) or not password:
        raise PasswordValidationError("password is required")

    if len(password) < MIN_PASSWORD_LENGTH:
        raise PasswordValidationError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )


def hash_password(password: str) -> str:
    """
    Hash password using bcrypt.

    Password is validated for strength before hashing.
    """
    validate_password_strength(password)
    salt = bcrypt.gensalt(rounds=current_app.config.get("BCRYPT_ROUNDS", 12))
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')  # Store as string in database


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify password against bcrypt hash.

    Returns True if password matches hash, False otherwise.
    Malformed hashes count as a mismatch.
    """
    if not password or not password_hash:
        return False

    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        return False


def register(*, email, password, name, surname=None, phone=None) -> User:
    """
    Self-registration. New accounts always get the plain user role;
    staff roles are granted by an admin afterwards.
    """
    email = coerce_email(email)
    name = coerce_str(name, "name", max_length=100)
    if len(name) < 2:
        raise ValidationError("name must be at least 2 characters")
    surname = coerce_str(surname, "surname", required=False, max_length=100) or ""
    phone = coerce_str(phone, "phone", required=False, max_length=32)
    password_hash = hash_password(password)

    with transaction():
        if db.session.query(User.id).filter_by(email=email).first():
            raise ConflictError("user already exists")

        user = User(
            email=email,
            name=name,
            surname=surname,
            phone=phone,
            role=Role.USER.value,
            password_hash=password_hash,
        )
        db.session.add(user)

    current_app.logger.info("Registered user %s", user.id)
    return user


def authenticate(email, password) -> User | None:
    """
    Authenticate user by email and password.

    Returns User if credentials valid, None otherwise.
    """
    if not isinstance(email, str) or not isinstance(password, str):
        return None
    if not email or not password:
        return None

    user = db.session.query(User).filter_by(email=email.strip().lower()).first()
    if not user:
        return None

    if not verify_password(password, user.password_hash):
        return None

    return user


def change_password(user_id: int, old_password, new_password) -> None:
    validate_password_strength(new_password)

    with transaction():
        user = db.session.get(User, user_id)
        if user is None:
            raise NotFoundError("user not found")

        if not verify_password(old_password, user.password_hash):
            raise ValidationError("incorrect old password")

        user.password_hash = hash_password(new_password)
