"""Configuration management for premium-engine."""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from premium_engine.exceptions import ConfigurationError
from premium_engine.models.enums import PremiumMode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PremiumModeSpec:
    """Billing frequency definition for one premium mode."""

    mode: str
    installments_per_year: int
    label: str
    recurring: bool = True

    @property
    def period_months(self) -> int | None:
        """Months between installments, ``None`` for non-recurring modes."""
        if not self.recurring:
            return None
        return 12 // self.installments_per_year


def _mode_key(mode: PremiumMode | str) -> str:
    if isinstance(mode, Enum):
        return str(mode.value)
    return str(mode)


class PremiumModeConfig:
    """Central premium-mode table shared by every engine component.

    Parameters
    ----------
    specs : Iterable[PremiumModeSpec]
        One entry per mode identifier.

    Raises
    ------
    ConfigurationError
        If an entry is duplicated or its installment count is not a positive
        divisor of 12 (exactly 1 for non-recurring modes).
    """

    def __init__(self, specs: Iterable[PremiumModeSpec]) -> None:
        self._specs: dict[str, PremiumModeSpec] = {}
        for spec in specs:
            key = _mode_key(spec.mode)
            if key in self._specs:
                raise ConfigurationError(f"Duplicate premium mode entry: {key}")
            count = spec.installments_per_year
            if not isinstance(count, int) or count <= 0 or 12 % count != 0:
                raise ConfigurationError(
                    f"Premium mode {key}: installments_per_year must be a positive divisor of 12, got {count!r}"
                )
            if not spec.recurring and count != 1:
                raise ConfigurationError(f"Premium mode {key}: non-recurring modes must have 1 installment per year")
            self._specs[key] = spec

    @classmethod
    def default(cls) -> "PremiumModeConfig":
        """Standard table for MONTHLY through SINGLE."""
        return cls(
            [
                PremiumModeSpec(PremiumMode.MONTHLY.value, 12, "Monthly"),
                PremiumModeSpec(PremiumMode.QUARTERLY.value, 4, "Quarterly"),
                PremiumModeSpec(PremiumMode.HALF_YEARLY.value, 2, "Half Yearly"),
                PremiumModeSpec(PremiumMode.YEARLY.value, 1, "Yearly"),
                PremiumModeSpec(PremiumMode.SINGLE.value, 1, "Single", recurring=False),
            ]
        )

    def validate_complete(self, required: Iterable[PremiumMode | str] = PremiumMode) -> "PremiumModeConfig":
        """Check that every required mode has an entry.

        Returns
        -------
        PremiumModeConfig
            ``self``, so the check can be chained at construction time.
        """
        missing = [_mode_key(mode) for mode in required if _mode_key(mode) not in self._specs]
        if missing:
            logger.error("Premium mode table is missing entries: %s", ", ".join(missing))
            raise ConfigurationError(f"Premium mode table is missing entries: {', '.join(missing)}")
        return self

    def resolve(self, mode: PremiumMode | str | None) -> PremiumModeSpec:
        """Return the entry for ``mode``.

        Raises
        ------
        ConfigurationError
            If ``mode`` is absent or has no entry.
        """
        if mode is None or mode == "":
            raise ConfigurationError("Premium mode is missing")
        spec = self._specs.get(_mode_key(mode))
        if spec is None:
            raise ConfigurationError(f"Unknown premium mode: {_mode_key(mode)}")
        return spec

    def __contains__(self, mode: object) -> bool:
        if not isinstance(mode, (str, Enum)):
            return False
        return _mode_key(mode) in self._specs

    def __iter__(self):
        return iter(self._specs.values())

    def __len__(self) -> int:
        return len(self._specs)

    def as_mapping(self) -> Mapping[str, PremiumModeSpec]:
        return dict(self._specs)


DEFAULT_PREMIUM_MODES = PremiumModeConfig.default().validate_complete()


@dataclass
class ScheduleConfig:
    """Premium schedule configuration."""

    grace_period_days: int = 30


@dataclass
class AlertConfig:
    """Due-date alert windows, in days from today."""

    due_soon_days: int = 7
    upcoming_days: int = 30


@dataclass
class OutputConfig:
    """Report output configuration."""

    json_output_dir: Path = field(default_factory=lambda: Path("output"))
    pretty_json: bool = False


@dataclass
class ScenarioConfig:
    """Configuration for sample portfolio generation."""

    name: str
    num_clients: int = 25
    max_policies_per_client: int = 4
    months_of_history: int = 18
    partial_payment_rate: float = 0.1


@dataclass
class EngineConfig:
    """Main configuration for premium-engine."""

    schedule: ScheduleConfig = field(default_factory=ScheduleConfig)
    alerts: AlertConfig = field(default_factory=AlertConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    scenario: ScenarioConfig | None = None
    seed: int | None = None
    log_level: str = "INFO"
    log_format: str = "standard"

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Create config from environment variables."""
        import os

        def _int(name: str, default: str) -> int:
            raw = os.getenv(name, default)
            try:
                return int(raw)
            except ValueError as exc:
                raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from exc

        schedule = ScheduleConfig(grace_period_days=_int("PREMIUM_GRACE_PERIOD_DAYS", "30"))

        alerts = AlertConfig(
            due_soon_days=_int("PREMIUM_DUE_SOON_DAYS", "7"),
            upcoming_days=_int("PREMIUM_UPCOMING_DAYS", "30"),
        )
        if alerts.upcoming_days < alerts.due_soon_days:
            raise ConfigurationError("PREMIUM_UPCOMING_DAYS must not be shorter than PREMIUM_DUE_SOON_DAYS")

        output = OutputConfig(
            json_output_dir=Path(os.getenv("OUTPUT_DIR", "output")),
            pretty_json=os.getenv("PRETTY_JSON", "false").lower() == "true",
        )

        return cls(
            schedule=schedule,
            alerts=alerts,
            output=output,
            seed=_int("SEED", "0") if os.getenv("SEED") else None,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )
