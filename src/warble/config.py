"""Application configuration.

AppConfig is a frozen dataclass: immutable after creation, no
string-key dict lookups. Derive variants with ``dataclasses.replace``.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(name="deploy", strict=True)
    """

    # Program name used in messages
    name: str = "app"

    # Validation at freeze
    validate: bool = True
    strict: bool = False  # ERROR diagnostics abort startup

    # No-match rendering
    suggest: bool = True
    max_suggestions: int = 3

    # Exit codes
    no_match_exit_code: int = 1
    conversion_error_exit_code: int = 2

    def __post_init__(self) -> None:
        if self.max_suggestions < 0:
            msg = f"max_suggestions must be >= 0, got {self.max_suggestions}"
            raise ValueError(msg)
