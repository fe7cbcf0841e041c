"""Immutable value types shared by every stage of the pipeline."""

from dataclasses import dataclass, fields, replace


@dataclass(frozen=True)
class Record:
    """One decoded access-log entry."""

    remote_host: str
    auth_user: str
    timestamp: int
    method: str
    resource: str
    protocol: str
    status_code: int
    bytes: int

    @property
    def section(self) -> str:
        """First path segment of the resource, e.g. ``/api`` for ``/api/user``."""
        end = self.resource.find("/", 1)
        if end == -1:
            return self.resource
        return self.resource[:end]


@dataclass(frozen=True)
class Config:
    """Window sizes and thresholds. Read-only once built."""

    stats_window: int = 10
    alert_window: int = 120
    alert_rate: float = 10
    maximum_timestamp_error: int = 1

    def __post_init__(self):
        # Windows and the rate must be positive; zero error disables reordering.
        for name in ("stats_window", "alert_window", "alert_rate"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        if self.maximum_timestamp_error < 0:
            raise ValueError("maximum_timestamp_error must not be negative")

    def replace(self, **overrides) -> "Config":
        """Copy with the given fields changed. ``None`` values are ignored
        so unset CLI flags fall through to the current value."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes)

    @classmethod
    def field_names(cls) -> tuple[str, ...]:
        return tuple(f.name for f in fields(cls))


DEFAULT_CONFIG = Config()
