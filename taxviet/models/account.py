"""
Account Models

An account is identified by an email address or phone number.
Identifiers are compared case-insensitively everywhere, so every
lookup and every storage key goes through normalize_identifier().

DESIGN DECISION: Secrets are stored as salted PBKDF2 hashes, never as
plain text. Login semantics are otherwise the same as a plain comparison:
an exact match of the supplied secret.
"""

import hashlib
import hmac
import secrets

from pydantic import BaseModel, ConfigDict, Field, field_validator


PBKDF2_ITERATIONS = 120_000


def normalize_identifier(identifier: str) -> str:
    """Trim and lowercase an email-or-phone identifier. Idempotent."""
    return identifier.strip().lower()


def hash_secret(secret: str, salt: str) -> str:
    """Derive the stored hash for a secret."""
    digest = hashlib.pbkdf2_hmac(
        "sha256",
        secret.encode("utf-8"),
        bytes.fromhex(salt),
        PBKDF2_ITERATIONS,
    )
    return digest.hex()


class Account(BaseModel):
    """
    A registered account.
    
    Persisted as one element of the `registered-users` JSON array,
    using the camelCase field names of the stored layout.
    """
    model_config = ConfigDict(
        populate_by_name=True,
        str_strip_whitespace=True,
    )
    
    identifier: str = Field(
        ...,
        min_length=1,
        alias="emailOrPhone",
        description="Email or phone number, normalized to lowercase"
    )
    full_name: str = Field(
        ...,
        min_length=1,
        max_length=200,
        alias="fullName",
    )
    secret_hash: str = Field(..., alias="secretHash")
    secret_salt: str = Field(..., alias="secretSalt")
    
    @field_validator('identifier')
    @classmethod
    def normalize(cls, v: str) -> str:
        return normalize_identifier(v)
    
    @classmethod
    def create(cls, identifier: str, full_name: str, secret: str) -> "Account":
        """Build a new account, hashing the secret with a fresh salt."""
        salt = secrets.token_hex(16)
        return cls(
            identifier=identifier,
            full_name=full_name,
            secret_hash=hash_secret(secret, salt),
            secret_salt=salt,
        )
    
    def matches(self, secret: str) -> bool:
        """True iff secret is exactly the one given at registration."""
        candidate = hash_secret(secret, self.secret_salt)
        return hmac.compare_digest(candidate, self.secret_hash)
    
    def to_storage_dict(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)
