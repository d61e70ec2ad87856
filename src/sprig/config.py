"""Application configuration.

AppConfig is a frozen dataclass: immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from dataclasses import dataclass

from sprig.routing.tree import validate_base_path


@dataclass(frozen=True, slots=True)
class AppConfig:
    """Application configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = AppConfig(base_path="/api/", debug=True)
    """

    # Routing
    base_path: str = "/"  # Must start and end with "/"

    # Error pages: include the failing middleware and exception text in 500s
    debug: bool = False

    # Level applied to the "sprig" logger; None leaves logging untouched
    log_level: str | None = None

    def __post_init__(self) -> None:
        validate_base_path(self.base_path)
