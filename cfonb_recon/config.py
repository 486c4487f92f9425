"""Configuration management for cfonb-recon."""

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Callable

from cfonb_recon.exceptions import ConfigurationError


@dataclass
class KafkaConfig:
    """Kafka producer configuration."""

    bootstrap_servers: str = "localhost:9092"
    acks: str = "all"
    linger_ms: int = 5
    compression: str = "snappy"
    retries: int = 3
    topic_prefix: str = "dev.recon"

    def to_dict(self) -> dict[str, Any]:
        """Convert to confluent-kafka config dict."""
        return {
            "bootstrap.servers": self.bootstrap_servers,
            "acks": self.acks,
            "linger.ms": self.linger_ms,
            "compression.type": self.compression,
            "retries": self.retries,
        }


@dataclass
class OutputConfig:
    """Output configuration."""

    json_output_dir: Path = field(default_factory=lambda: Path("output"))
    pretty_json: bool = False


@dataclass
class MatchingConfig:
    """Payment matching configuration."""

    # None lets the executor pick; 1 matches accounts inline
    max_workers: int | None = None


@dataclass
class ReconConfig:
    """Main configuration for cfonb-recon."""

    kafka: KafkaConfig = field(default_factory=KafkaConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    matching: MatchingConfig = field(default_factory=MatchingConfig)
    reference_date: date | None = None
    log_level: str = "INFO"
    log_format: str = "standard"

    def clock(self) -> Callable[[], date]:
        """Return the provider used to infer the century of two-digit years.

        A pinned ``reference_date`` makes decoding reproducible; otherwise
        the wall clock is used.
        """
        if self.reference_date is None:
            return date.today
        reference = self.reference_date
        return lambda: reference

    @classmethod
    def from_env(cls) -> "ReconConfig":
        """Create config from environment variables."""
        import os

        kafka = KafkaConfig(
            bootstrap_servers=os.getenv("KAFKA_BOOTSTRAP_SERVERS", "localhost:9092"),
            acks=os.getenv("KAFKA_ACKS", "all"),
            topic_prefix=os.getenv("KAFKA_TOPIC_PREFIX", "dev.recon"),
        )

        output = OutputConfig(
            json_output_dir=Path(os.getenv("OUTPUT_DIR", "output")),
            pretty_json=os.getenv("PRETTY_JSON", "false").lower() == "true",
        )

        raw_workers = os.getenv("MATCH_MAX_WORKERS")
        matching = MatchingConfig(
            max_workers=_parse_workers(raw_workers) if raw_workers else None,
        )

        raw_reference = os.getenv("REFERENCE_DATE")

        return cls(
            kafka=kafka,
            output=output,
            matching=matching,
            reference_date=parse_reference_date(raw_reference) if raw_reference else None,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=os.getenv("LOG_FORMAT", "standard"),
        )


def parse_reference_date(value: str) -> date:
    """Parse an ISO ``YYYY-MM-DD`` reference date."""
    try:
        return date.fromisoformat(value)
    except ValueError as exc:
        raise ConfigurationError(f"REFERENCE_DATE must be an ISO date, got {value!r}") from exc


def _parse_workers(value: str) -> int:
    try:
        workers = int(value)
    except ValueError as exc:
        raise ConfigurationError(f"MATCH_MAX_WORKERS must be an integer, got {value!r}") from exc
    if workers < 1:
        raise ConfigurationError(f"MATCH_MAX_WORKERS must be at least 1, got {workers}")
    return workers
