"""
Database configuration.

`DatabaseConfig` wraps a `DatabaseSettings` record with typed accessors and routes
every password operation through the secure password policy. Applications normally
create one and hand it to whatever opens connections; `get_database_config()` returns
a shared instance for code that wants process-wide settings.
"""
import logging
import os
from pathlib import Path
from typing import Mapping, Optional

from pydantic import ValidationError

from core.exceptions import InvalidArgumentError
from core.password_policy import PasswordPolicy
from core.security import PasswordHasher, default_hasher
from schemas.settings_schemas import (
    MIN_COUNT_FLOOR,
    MIN_PASSWORD_LENGTH_FLOOR,
    PROPERTY_KEYS,
    DatabaseSettings,
)

logger = logging.getLogger(__name__)

# --- Environment overrides ---
# Environment variable -> settings field.
ENV_VARIABLES = {
    "DB_NAME": "database_name",
    "DB_PATH": "database_path",
    "DB_USER": "database_user",
    "DB_CREATE": "create_database",
    "DB_SECURE_PASSWORDS": "secure_passwords",
    "DB_MIN_PASSWORD_LENGTH": "min_password_length",
    "DB_MIN_SYMBOLS": "min_symbol_count",
    "DB_MIN_DIGITS": "min_digit_count",
    "DB_MIN_UPPERCASE": "min_uppercase_count",
}
# Applied after the other settings so it goes through the password policy.
DB_PASSWORD_ENV = "DB_PASSWORD"


class DatabaseConfig:

    def __init__(self, settings: Optional[DatabaseSettings] = None, hasher: PasswordHasher = default_hasher):
        self._settings = settings if settings is not None else DatabaseSettings()
        self._policy = PasswordPolicy(self._settings, hasher)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None,
                 hasher: PasswordHasher = default_hasher) -> "DatabaseConfig":
        """
        Builds a configuration from environment variables, falling back to defaults.

        Raises InvalidArgumentError if a variable cannot be parsed or a threshold is
        below its floor, and InvalidPasswordError if DB_PASSWORD is rejected by the
        secure password policy.
        """
        environ = os.environ if environ is None else environ
        properties = {}
        for variable, field_name in ENV_VARIABLES.items():
            value = environ.get(variable)
            if value is not None:
                properties[PROPERTY_KEYS[field_name]] = value

        try:
            settings = DatabaseSettings.from_properties(properties)
        except ValidationError as e:
            raise InvalidArgumentError(f"Invalid database settings in environment: {e}") from e

        config = cls(settings, hasher)
        password = environ.get(DB_PASSWORD_ENV)
        if password is not None:
            config.set_database_password(password)
        return config

    @property
    def settings(self) -> DatabaseSettings:
        return self._settings

    @property
    def policy(self) -> PasswordPolicy:
        return self._policy

    # --- Connection settings ---

    @property
    def database_name(self) -> str:
        return self._settings.database_name

    @database_name.setter
    def database_name(self, name: str) -> None:
        self._settings.database_name = name

    @property
    def database_path(self) -> str:
        return self._settings.database_path

    @database_path.setter
    def database_path(self, path: str) -> None:
        self._settings.database_path = str(path)

    @property
    def database_user(self) -> str:
        return self._settings.database_user

    @database_user.setter
    def database_user(self, user: str) -> None:
        self._settings.database_user = user

    @property
    def create_database(self) -> bool:
        return self._settings.create_database

    @create_database.setter
    def create_database(self, create: bool) -> None:
        self._settings.create_database = create

    @property
    def database_file(self) -> Path:
        """Full path of the database file."""
        return Path(self.database_path) / self.database_name

    # --- Password ---

    @property
    def database_password(self) -> str:
        """The stored password: clear text, or a digest if it was set with secure passwords on."""
        return self._settings.database_password

    def set_database_password(self, candidate: str) -> None:
        self._policy.set_password(candidate)

    def password_matches(self, candidate: str) -> bool:
        return self._policy.password_matches(candidate)

    def secure_password_matches(self, candidate: Optional[str]) -> bool:
        return self._policy.secure_password_matches(candidate)

    def credentials_match(self, user: str, candidate: Optional[str]) -> bool:
        """
        Checks a user name and password against the configured credentials.

        Uses digest comparison while secure passwords are on, clear text otherwise.
        A missing password never matches.
        """
        if user != self.database_user:
            logger.debug("Credential check failed: unknown database user.")
            return False
        if self.secure_passwords_enabled:
            return self.secure_password_matches(candidate)
        if candidate is None:
            return False
        return self.password_matches(candidate)

    # --- Secure password policy ---

    @property
    def secure_passwords_enabled(self) -> bool:
        return self._settings.secure_passwords

    def turn_on_secure_passwords(self) -> None:
        # The stored password is left as is; callers must reset it to get a digest.
        self._settings.secure_passwords = True
        logger.info("Secure passwords turned on.")

    def turn_off_secure_passwords(self) -> None:
        self._settings.secure_passwords = False
        logger.info("Secure passwords turned off.")

    @property
    def min_password_length(self) -> int:
        return self._settings.min_password_length

    @min_password_length.setter
    def min_password_length(self, minimum: int) -> None:
        self._set_threshold(
            "min_password_length", minimum,
            f"The minimum length for secure passwords may not be less than {MIN_PASSWORD_LENGTH_FLOOR}.",
        )

    @property
    def min_symbol_count(self) -> int:
        return self._settings.min_symbol_count

    @min_symbol_count.setter
    def min_symbol_count(self, minimum: int) -> None:
        self._set_threshold(
            "min_symbol_count", minimum,
            f"Secure passwords must require at least {MIN_COUNT_FLOOR} symbol.",
        )

    @property
    def min_digit_count(self) -> int:
        return self._settings.min_digit_count

    @min_digit_count.setter
    def min_digit_count(self, minimum: int) -> None:
        self._set_threshold(
            "min_digit_count", minimum,
            f"Secure passwords must require at least {MIN_COUNT_FLOOR} number.",
        )

    @property
    def min_uppercase_count(self) -> int:
        return self._settings.min_uppercase_count

    @min_uppercase_count.setter
    def min_uppercase_count(self, minimum: int) -> None:
        self._set_threshold(
            "min_uppercase_count", minimum,
            f"Secure passwords must require at least {MIN_COUNT_FLOOR} uppercase letter.",
        )

    def _set_threshold(self, field_name: str, minimum: int, message: str) -> None:
        try:
            setattr(self._settings, field_name, minimum)
        except ValidationError as e:
            raise InvalidArgumentError(message) from e
        logger.debug(f"{field_name} set to {minimum}.")


_database_config: Optional[DatabaseConfig] = None


def get_database_config() -> DatabaseConfig:
    """Returns the shared configuration, creating it with defaults on first use."""
    global _database_config
    if _database_config is None:
        _database_config = DatabaseConfig()
    return _database_config


def reset_database_config() -> None:
    """Drops the shared configuration so the next `get_database_config()` starts from defaults."""
    global _database_config
    _database_config = None


if __name__ == '__main__':
    config = DatabaseConfig.from_env()
    print("--- Database Configuration ---")
    print(f"Database file: {config.database_file}")
    print(f"Database user: {config.database_user}")
    print("Database password: (not shown)")
    print(f"Secure passwords: {config.secure_passwords_enabled}")
    print(f"Thresholds (length/symbols/digits/uppercase): "
          f"{config.min_password_length}/{config.min_symbol_count}/"
          f"{config.min_digit_count}/{config.min_uppercase_count}")
    if not config.database_file.exists():
        print(f"NOTE: No database file at {config.database_file} yet.")
    print("--- End of Configuration ---")
