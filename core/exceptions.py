from enum import Enum


class DatabaseConfigError(Exception):
    """Base class for errors raised by the database configuration layer."""


class InvalidArgumentError(DatabaseConfigError, ValueError):
    """A configuration threshold was set below its permitted floor."""


class PasswordRule(str, Enum):
    """The complexity rule a rejected password violated."""
    MISSING = "missing"
    LENGTH = "length"
    SYMBOL = "symbol"
    DIGIT = "digit"
    LOWERCASE = "lowercase"
    UPPERCASE = "uppercase"


class InvalidPasswordError(DatabaseConfigError, ValueError):
    """
    Raised when a candidate password fails one of the complexity rules.

    Only the first rule violated is reported; `rule` tells the caller which one.
    """

    def __init__(self, rule: PasswordRule, message: str) -> None:
        super().__init__(message)
        self.rule = rule
        self.message = message
