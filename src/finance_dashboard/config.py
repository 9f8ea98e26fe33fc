"""Configuration loading and validation for the finance dashboard."""

from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from finance_dashboard.models.expense import UNSPECIFIED_CATEGORY
from finance_dashboard.models.unit import BusinessUnit, SheetType
from finance_dashboard.parsers.base import LayoutError
from finance_dashboard.parsers.layouts import DEFAULT_SHEET_LAYOUTS, SheetLayout
from finance_dashboard.utils.cells import MoneyPolicy
from finance_dashboard.utils.logging_config import get_logger

logger = get_logger(__name__)


class ConfigError(Exception):
    """Exception raised for configuration errors."""

    pass


# Column ranges of each unit's block in the revenue sheet
DEFAULT_REVENUE_RANGES: dict[BusinessUnit, str] = {
    BusinessUnit.HOTEL: "B:G",
    BusinessUnit.RESTAURANT: "J:M",
    BusinessUnit.SPA: "P:S",
    BusinessUnit.POOL: "V:Y",
    BusinessUnit.BAR: "AB:AE",
}


@dataclass
class PipelineConfig:
    """Configuration for parsing and aggregation.

    Attributes:
        money_policy: Treatment of non-numeric money cells in revenue data.
        repair_years: Whether to repair known malformed ledger years.
        unspecified_category: Category used for expenses with no category.
    """

    money_policy: MoneyPolicy = MoneyPolicy.STRICT
    repair_years: bool = True
    unspecified_category: str = UNSPECIFIED_CATEGORY

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "PipelineConfig":
        """Create from dictionary."""
        policy_name = str(data.get("money_policy", MoneyPolicy.STRICT.value)).lower()
        try:
            policy = MoneyPolicy(policy_name)
        except ValueError:
            raise ConfigError(
                f"money_policy must be 'strict' or 'lenient', got {policy_name!r}"
            ) from None

        repair_years = data.get("repair_years", True)
        if not isinstance(repair_years, bool):
            raise ConfigError(f"repair_years must be true or false, got {repair_years!r}")

        return cls(
            money_policy=policy,
            repair_years=repair_years,
            unspecified_category=str(data.get("unspecified_category", UNSPECIFIED_CATEGORY)),
        )


@dataclass
class SheetsConfig:
    """Where each source range lives.

    Attributes:
        revenue_sheet: Worksheet holding the revenue blocks.
        revenue_ranges: Column range of each unit's revenue block.
        cash_sheet: Worksheet of cash-paid expenses.
        account_sheet: Worksheet of account-paid expenses.
        expense_range: Column range read from both expense sheets.
        breakfast_sheet: Worksheet of the breakfast ledger.
        breakfast_range: Column range of the breakfast ledger.
    """

    revenue_sheet: str = "Выручка"
    revenue_ranges: dict[BusinessUnit, str] = field(
        default_factory=lambda: dict(DEFAULT_REVENUE_RANGES)
    )
    cash_sheet: str = "наличные"
    account_sheet: str = "Счет"
    expense_range: str = "A:Z"
    breakfast_sheet: str = "Завтраки"
    breakfast_range: str = "A:C"

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "SheetsConfig":
        """Create from dictionary."""
        ranges = dict(DEFAULT_REVENUE_RANGES)
        raw_ranges = data.get("revenue_ranges") or {}
        if not isinstance(raw_ranges, Mapping):
            raise ConfigError("'revenue_ranges' must be a mapping of unit to range")
        for unit_name, cell_range in raw_ranges.items():
            try:
                ranges[BusinessUnit(str(unit_name).lower())] = str(cell_range)
            except ValueError:
                raise ConfigError(f"Unknown business unit in revenue_ranges: {unit_name!r}") from None

        return cls(
            revenue_sheet=str(data.get("revenue_sheet", "Выручка")),
            revenue_ranges=ranges,
            cash_sheet=str(data.get("cash_sheet", "наличные")),
            account_sheet=str(data.get("account_sheet", "Счет")),
            expense_range=str(data.get("expense_range", "A:Z")),
            breakfast_sheet=str(data.get("breakfast_sheet", "Завтраки")),
            breakfast_range=str(data.get("breakfast_range", "A:C")),
        )

    def expense_sheet(self, sheet_type: SheetType) -> str:
        """Worksheet name for an expense sheet type."""
        return self.cash_sheet if sheet_type is SheetType.CASH else self.account_sheet


@dataclass
class CacheConfig:
    """Configuration for report caching.

    Attributes:
        ttl_seconds: How long a built report stays fresh.
    """

    ttl_seconds: float = 300.0

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "CacheConfig":
        """Create from dictionary."""
        ttl = float(data.get("ttl_seconds", 300.0))  # type: ignore[arg-type]
        if ttl < 0:
            raise ConfigError(f"cache.ttl_seconds must be non-negative, got {ttl}")
        return cls(ttl_seconds=ttl)


@dataclass
class LoggingConfig:
    """Configuration for logging.

    Attributes:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file: Path to log file.
    """

    level: str = "INFO"
    file: str = "finance_dashboard.log"

    @classmethod
    def from_dict(cls, data: dict[str, object]) -> "LoggingConfig":
        """Create from dictionary."""
        return cls(
            level=str(data.get("level", "INFO")),
            file=str(data.get("file", "finance_dashboard.log")),
        )


@dataclass
class Config:
    """Main configuration container."""

    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    sheets: SheetsConfig = field(default_factory=SheetsConfig)
    layouts: dict[SheetType, SheetLayout] = field(
        default_factory=lambda: dict(DEFAULT_SHEET_LAYOUTS)
    )
    cache: CacheConfig = field(default_factory=CacheConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def load_yaml_file(path: Path) -> dict[str, object]:
    """Load a YAML file.

    Args:
        path: Path to the YAML file.

    Returns:
        Parsed YAML content.

    Raises:
        FileNotFoundError: If file doesn't exist.
        ConfigError: If the file is not valid YAML or not a mapping.
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path, encoding="utf-8") as f:
        try:
            content = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ConfigError(f"{path} must contain a mapping, got {type(content).__name__}")
    return content


def _section(data: dict[str, object], name: str) -> dict[str, object]:
    section = data.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(f"'{name}' must be a mapping, got {type(section).__name__}")
    return section


def load_layouts(data: dict[str, object]) -> dict[SheetType, SheetLayout]:
    """Build expense sheet layouts, applying overrides on top of the defaults.

    Args:
        data: The ``layouts`` section (keys ``cash`` / ``account``).

    Returns:
        Layout per sheet type.
    """
    layouts = dict(DEFAULT_SHEET_LAYOUTS)
    for sheet_name, layout_data in data.items():
        try:
            sheet_type = SheetType(str(sheet_name).lower())
        except ValueError:
            raise ConfigError(f"Unknown expense sheet in layouts: {sheet_name!r}") from None
        if not isinstance(layout_data, dict):
            raise ConfigError(f"Layout for '{sheet_name}' must be a mapping")

        default = DEFAULT_SHEET_LAYOUTS[sheet_type]
        try:
            override = SheetLayout.from_dict(sheet_type, layout_data)
            columns = dict(override.columns) if override.columns else dict(default.columns)
            layouts[sheet_type] = SheetLayout(
                sheet_type=sheet_type,
                columns=columns,
                expected_headers=override.expected_headers,
            )
        except LayoutError as e:
            raise ConfigError(f"Invalid {sheet_type.value} layout: {e}") from e

    return layouts


def load_config(settings_path: Optional[Path] = None, config_dir: Optional[Path] = None) -> Config:
    """Load configuration from settings.yaml.

    Missing files fall back to defaults.

    Args:
        settings_path: Path to settings.yaml (or None to use default).
        config_dir: Base config directory (default: ./config).

    Returns:
        Complete Config object.

    Raises:
        ConfigError: If the settings file is invalid.
    """
    if config_dir is None:
        config_dir = Path("config")
    if settings_path is None:
        settings_path = config_dir / "settings.yaml"

    config = Config()
    if not settings_path.exists():
        logger.warning(f"Settings file not found: {settings_path}, using defaults")
        return config

    data = load_yaml_file(settings_path)
    config.pipeline = PipelineConfig.from_dict(_section(data, "pipeline"))
    config.sheets = SheetsConfig.from_dict(_section(data, "sheets"))
    config.layouts = load_layouts(_section(data, "layouts"))
    config.cache = CacheConfig.from_dict(_section(data, "cache"))
    config.logging = LoggingConfig.from_dict(_section(data, "logging"))

    logger.info(
        f"Loaded settings from {settings_path} "
        f"(money_policy={config.pipeline.money_policy.value}, "
        f"repair_years={config.pipeline.repair_years})"
    )
    return config
