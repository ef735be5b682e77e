# Overview: Service-layer operations for accounts and password hashing.

"""
Account Service

Uses bcrypt for password hashing and validates password strength before
any hash is produced. Email is the login identifier and is unique.
"""

import re

import bcrypt

from ..extensions import db
from ..models import User
from ..models.auth import VALID_ROLES


EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class PasswordValidationError(Exception):
    """Raised when password doesn't meet strength requirements."""
    pass


def validate_password_strength(password: str) -> None:
    """
    Requirements:
    - Minimum 8 characters
    - At least one letter
    - At least one digit
    """
    if len(password) < 8:
        raise PasswordValidationError("Password must be at least 8 characters long")

    if not re.search(r'[A-Za-z]', password):
        raise PasswordValidationError("Password must contain at least one letter")

    if not re.search(r'\d', password):
        raise PasswordValidationError("Password must contain at least one digit")


def hash_password(password: str) -> str:
    """Validate strength, then hash with bcrypt (cost factor 12)."""
    validate_password_strength(password)
    salt = bcrypt.gensalt(rounds=12)
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        # Malformed hash
        return False


def normalize_email(email: str) -> str:
    return email.strip().lower()


def create_user(name: str, email: str, password: str, role: str) -> User:
    """
    Create a user with a bcrypt password hash.

    Raises:
        ValueError: invalid name/email/role, or email already registered
        PasswordValidationError: weak password
    """
    name = (name or "").strip()
    email = normalize_email(email or "")

    if not name:
        raise ValueError("Name is required")
    if not EMAIL_RE.match(email):
        raise ValueError("Invalid email address")
    if role not in VALID_ROLES:
        raise ValueError(f"Invalid role: {role}. Must be one of {', '.join(VALID_ROLES)}")

    existing = db.session.query(User).filter_by(email=email).first()
    if existing:
        raise ValueError("A user with this email already exists")

    password_hash = hash_password(password)

    user = User(
        name=name,
        email=email,
        password_hash=password_hash,
        role=role,
        wallet_balance_paise=0,
    )

    db.session.add(user)
    db.session.commit()
    return user
