from pathlib import Path
from typing import Dict, Mapping

from pydantic import BaseModel, ConfigDict, Field

# --- Defaults ---
DEFAULT_DATABASE_NAME = "sample.db"
DEFAULT_DATABASE_USER = "app"
DEFAULT_DATABASE_PASSWORD = "app"
DEFAULT_MIN_PASSWORD_LENGTH = 10
DEFAULT_MIN_SYMBOL_COUNT = 1
DEFAULT_MIN_DIGIT_COUNT = 1
DEFAULT_MIN_UPPERCASE_COUNT = 1

# --- Floors ---
MIN_PASSWORD_LENGTH_FLOOR = 8
MIN_COUNT_FLOOR = 1

# Field name -> dotted key used by the flat string view of the settings.
PROPERTY_KEYS: Dict[str, str] = {
    "database_name": "db.name",
    "database_path": "db.path",
    "database_user": "db.user",
    "database_password": "db.password",
    "create_database": "db.create",
    "secure_passwords": "db.secure.passwords",
    "min_password_length": "db.secure.passwords.length",
    "min_symbol_count": "db.secure.passwords.symbols",
    "min_digit_count": "db.secure.passwords.numbers",
    "min_uppercase_count": "db.secure.passwords.upper",
}


def _home_directory() -> str:
    return str(Path.home())


class DatabaseSettings(BaseModel):
    """
    Typed settings for the embedded database.

    Values are validated when assigned, so a threshold below its floor never
    reaches the record and reads never have to parse anything.
    """
    model_config = ConfigDict(validate_assignment=True)

    database_name: str = DEFAULT_DATABASE_NAME
    database_path: str = Field(default_factory=_home_directory)
    database_user: str = DEFAULT_DATABASE_USER
    # Clear text or a digest, depending on how it was written.
    database_password: str = DEFAULT_DATABASE_PASSWORD
    create_database: bool = True

    secure_passwords: bool = False
    min_password_length: int = Field(default=DEFAULT_MIN_PASSWORD_LENGTH, ge=MIN_PASSWORD_LENGTH_FLOOR)
    min_symbol_count: int = Field(default=DEFAULT_MIN_SYMBOL_COUNT, ge=MIN_COUNT_FLOOR)
    min_digit_count: int = Field(default=DEFAULT_MIN_DIGIT_COUNT, ge=MIN_COUNT_FLOOR)
    min_uppercase_count: int = Field(default=DEFAULT_MIN_UPPERCASE_COUNT, ge=MIN_COUNT_FLOOR)

    def to_properties(self) -> Dict[str, str]:
        """Renders the settings as a flat mapping of dotted keys to strings."""
        properties = {}
        for field_name, key in PROPERTY_KEYS.items():
            value = getattr(self, field_name)
            if isinstance(value, bool):
                value = "true" if value else "false"
            properties[key] = str(value)
        return properties

    @classmethod
    def from_properties(cls, properties: Mapping[str, str]) -> "DatabaseSettings":
        """
        Builds settings from a flat mapping of dotted keys.

        Missing keys keep their defaults; unknown keys are ignored.
        Raises pydantic.ValidationError if a value cannot be parsed or is below its floor.
        """
        values = {
            field_name: properties[key]
            for field_name, key in PROPERTY_KEYS.items()
            if key in properties
        }
        return cls.model_validate(values)
