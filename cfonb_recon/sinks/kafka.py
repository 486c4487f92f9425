"""Kafka sink for handing reconciliation results to downstream services."""

import json
import logging
import time
from dataclasses import dataclass, is_dataclass
from typing import Any

from confluent_kafka import Producer

from cfonb_recon.config import KafkaConfig
from cfonb_recon.exceptions import SinkError
from cfonb_recon.sinks.serialization import to_dict

logger = logging.getLogger(__name__)


@dataclass
class ProducerStats:
    """Track producer delivery statistics."""

    sent: int = 0
    delivered: int = 0
    failed: int = 0
    start_time: float | None = None
    end_time: float | None = None

    @property
    def success_rate(self) -> float:
        """Calculate success rate."""
        total = self.delivered + self.failed
        return self.delivered / total if total > 0 else 0.0


class KafkaSink:
    """Output results to Kafka topics.

    Messages are keyed by account id: all results of one account land in
    the same partition and reach consumers in the order they were matched.
    """

    KEY_FIELD = "account_id"

    def __init__(self, config: KafkaConfig | str, flush_timeout: float = 30.0) -> None:
        """Initialize Kafka sink.

        Parameters
        ----------
        config : KafkaConfig | str
            Producer configuration or bootstrap servers string.
        flush_timeout : float
            Seconds to wait for outstanding deliveries at the end of a batch.
        """
        if isinstance(config, str):
            config = KafkaConfig(bootstrap_servers=config)

        self.config = config
        self.flush_timeout = flush_timeout
        self.producer = self._create_producer()
        self.stats = ProducerStats()

    def _create_producer(self) -> Producer:
        """Create Kafka producer with configuration."""
        return Producer(self.config.to_dict())

    def _delivery_callback(self, err: Any, msg: Any) -> None:
        """Handle delivery reports."""
        if err:
            self.stats.failed += 1
            logger.error("Delivery failed: %s", err)
        else:
            self.stats.delivered += 1
            logger.debug("Delivered to %s[%d]@%d", msg.topic(), msg.partition(), msg.offset())

    def _get_key(self, record: Any) -> str | None:
        """Extract message key from record."""
        if is_dataclass(record):
            return getattr(record, self.KEY_FIELD, None)
        elif isinstance(record, dict):
            return record.get(self.KEY_FIELD)
        return None

    def send(self, topic: str, record: Any, key: str | None = None) -> None:
        """Send a single record to Kafka topic."""
        value = json.dumps(to_dict(record), ensure_ascii=False, default=str).encode("utf-8")

        if key is None:
            key = self._get_key(record)

        self.producer.produce(
            topic=topic,
            key=key.encode("utf-8") if key else None,
            value=value,
            callback=self._delivery_callback,
        )
        self.stats.sent += 1
        self.producer.poll(0)

    def write_batch(self, topic: str, records: list[Any]) -> None:
        """Write a batch of records to a Kafka topic.

        Raises
        ------
        SinkError
            If some messages were not delivered once the batch is flushed.
        """
        logger.info("Writing batch to %s: %d records", topic, len(records))
        if self.stats.start_time is None:
            self.stats.start_time = time.time()

        failed_before = self.stats.failed
        for record in records:
            self.send(topic, record)

        remaining = self.flush()
        self.stats.end_time = time.time()
        logger.info(
            "Batch complete: sent=%d, delivered=%d, failed=%d",
            self.stats.sent,
            self.stats.delivered,
            self.stats.failed,
        )

        if remaining or self.stats.failed > failed_before:
            raise SinkError(
                f"{topic}: {self.stats.failed - failed_before} message(s) failed, "
                f"{remaining} still queued after {self.flush_timeout}s"
            )

    def flush(self) -> int:
        """Flush pending messages, returning how many are still queued."""
        return self.producer.flush(self.flush_timeout)

    def close(self) -> None:
        """Flush and close the producer."""
        self.flush()
        logger.info(
            "Kafka sink closed: sent=%d, delivered=%d, failed=%d",
            self.stats.sent,
            self.stats.delivered,
            self.stats.failed,
        )
