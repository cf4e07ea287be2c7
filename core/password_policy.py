"""
Secure password policy for the database password.

While secure passwords are off, the password is kept as clear text. While they are
on, a candidate must satisfy the complexity thresholds held in the settings and only
its digest is stored. Switching modes never rewrites a password that is already stored.
"""
import logging
from typing import NamedTuple, Optional

from core.exceptions import InvalidPasswordError, PasswordRule
from core.security import PasswordHasher, default_hasher
from schemas.settings_schemas import DatabaseSettings

logger = logging.getLogger(__name__)

# Lowercase letters have no configurable minimum.
MIN_LOWERCASE_COUNT = 1


class CharacterCounts(NamedTuple):
    uppercase: int = 0
    lowercase: int = 0
    digits: int = 0
    symbols: int = 0


def count_characters(candidate: str) -> CharacterCounts:
    """
    Counts the character classes in `candidate`.

    Each character lands in at most one class, checked in the order
    uppercase, lowercase, digit, symbol. A symbol is anything that is neither a
    letter nor a digit, so letters without case (e.g. CJK ideographs) are not counted.
    """
    uppercase = lowercase = digits = symbols = 0
    for char in candidate:
        if char.isupper():
            uppercase += 1
        elif char.islower():
            lowercase += 1
        elif char.isdecimal():
            digits += 1
        elif not char.isalpha():
            symbols += 1
    return CharacterCounts(uppercase, lowercase, digits, symbols)


class PasswordPolicy:
    """Validates, hashes and compares the password stored in a `DatabaseSettings` record."""

    def __init__(self, settings: DatabaseSettings, hasher: PasswordHasher = default_hasher):
        self.settings = settings
        self.hasher = hasher

    @property
    def enabled(self) -> bool:
        return self.settings.secure_passwords

    def validate(self, candidate: Optional[str]) -> None:
        """
        Checks `candidate` against the complexity rules.

        Rules are checked in a fixed order (length, symbols, digits, lowercase,
        uppercase) and the first one violated is raised as InvalidPasswordError.
        Validation applies regardless of whether secure passwords are on.
        """
        if candidate is None:
            raise InvalidPasswordError(PasswordRule.MISSING, "A password is required.")

        min_length = self.settings.min_password_length
        if len(candidate) < min_length:
            raise InvalidPasswordError(
                PasswordRule.LENGTH,
                f"Secure passwords must be at least {min_length} characters long.",
            )

        counts = count_characters(candidate)
        if counts.symbols < self.settings.min_symbol_count:
            raise InvalidPasswordError(
                PasswordRule.SYMBOL,
                f"Secure passwords must contain at least {self.settings.min_symbol_count} symbol(s).",
            )
        if counts.digits < self.settings.min_digit_count:
            raise InvalidPasswordError(
                PasswordRule.DIGIT,
                f"Secure passwords must contain at least {self.settings.min_digit_count} number(s).",
            )
        if counts.lowercase < MIN_LOWERCASE_COUNT:
            raise InvalidPasswordError(
                PasswordRule.LOWERCASE,
                "Secure passwords must contain at least one lowercase letter.",
            )
        if counts.uppercase < self.settings.min_uppercase_count:
            raise InvalidPasswordError(
                PasswordRule.UPPERCASE,
                f"Secure passwords must contain at least {self.settings.min_uppercase_count} uppercase letter(s).",
            )

    def digest(self, candidate: str) -> str:
        """Salts `candidate` by its length and returns its one-way digest."""
        salt = self.hasher.generate_salt(len(candidate))
        return self.hasher.hash_password(candidate, salt)

    def set_password(self, candidate: Optional[str]) -> None:
        """
        Stores `candidate` as the database password.

        Clear text while secure passwords are off; otherwise the candidate is
        validated and only its digest is stored. A rejected candidate leaves the
        stored password untouched.
        """
        if candidate is None:
            raise InvalidPasswordError(PasswordRule.MISSING, "A password is required.")

        if not self.enabled:
            self.settings.database_password = candidate
            logger.debug("Database password stored as clear text.")
            return

        try:
            self.validate(candidate)
        except InvalidPasswordError as e:
            logger.warning(f"Rejected database password: failed the {e.rule.value} rule.")
            raise
        self.settings.database_password = self.digest(candidate)
        logger.debug("Database password stored as a digest.")

    def secure_password_matches(self, candidate: Optional[str]) -> bool:
        """
        Checks `candidate` against a stored digest.

        Returns False for a missing, empty or blank candidate instead of raising.
        """
        if candidate is None or not candidate.strip():
            return False
        return self.hasher.digests_match(self.digest(candidate), self.settings.database_password)

    def password_matches(self, candidate: Optional[str]) -> bool:
        """Case-sensitive comparison of `candidate` with the stored clear text."""
        if candidate is None:
            raise InvalidPasswordError(PasswordRule.MISSING, "A password is required.")
        return candidate == self.settings.database_password
