"""Default configuration parameters for the dashboard engine."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class ApiParams:
    """Market-data provider parameters."""
    base_url: str = "https://api.coingecko.com/api/v3"
    vs_currency: str = "usd"                          # Fiat quote currency
    timeout_seconds: float = 10.0
    default_retry_after_seconds: float = 45.0         # 429 hint when no Retry-After
    chart_interval: str = "daily"                     # hourly trips rate limits


@dataclass(frozen=True)
class SegmentParams:
    """Ranked universe partitioning."""
    size: int = 100                                   # Coins per segment
    count: int = 3                                    # Top 100 / 200 / 300
    default_page: int = 1


@dataclass(frozen=True)
class ViewParams:
    """Coin table defaults."""
    default_sort_field: str = "market_cap"
    default_sort_direction: str = "desc"


@dataclass(frozen=True)
class CompareParams:
    """Comparison chart defaults."""
    default_days: int = 365
    allowed_days: tuple[int, ...] = (7, 30, 90, 365)
    default_a: str = "bitcoin"
    default_b: str = "ethereum"


@dataclass(frozen=True)
class ExitPlanParams:
    """Take-profit simulator defaults, kept as raw text like user input."""
    default_entry_price: str = "1"
    default_total_tokens: str = "1000"
    default_rows: tuple[tuple[str, str], ...] = (
        ("1.5", "30"),
        ("2.0", "30"),
        ("3.0", "40"),
    )


@dataclass(frozen=True)
class StorageParams:
    """Watchlist persistence parameters."""
    db_path: str = "coinscope.db"
    watchlist_key: str = "watchlistIds"


@dataclass(frozen=True)
class LoggingParams:
    """structlog output settings."""
    level: str = "INFO"
    format_json: bool = False
    include_caller: bool = False
    quiet_loggers: tuple[str, ...] = ("httpx", "httpcore")


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    api: ApiParams
    segments: SegmentParams
    view: ViewParams
    compare: CompareParams
    exit_plan: ExitPlanParams
    storage: StorageParams
    logging: LoggingParams = field(default_factory=LoggingParams)


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        api=ApiParams(),
        segments=SegmentParams(),
        view=ViewParams(),
        compare=CompareParams(),
        exit_plan=ExitPlanParams(),
        storage=StorageParams(),
        logging=LoggingParams(),
    )
