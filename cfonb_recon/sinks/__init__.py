"""Output sinks handing reconciliation results to external collaborators."""

from cfonb_recon.sinks.base import MATCHED_ENTITY, UNMATCHED_ENTITY, Sink, publish_report
from cfonb_recon.sinks.console import ConsoleSink
from cfonb_recon.sinks.json_file import JsonFileSink
from cfonb_recon.sinks.kafka import KafkaSink

__all__ = [
    "ConsoleSink",
    "JsonFileSink",
    "KafkaSink",
    "MATCHED_ENTITY",
    "Sink",
    "UNMATCHED_ENTITY",
    "publish_report",
]
