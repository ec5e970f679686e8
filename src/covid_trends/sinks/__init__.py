"""Side-effect sinks injected into the service layer."""

from covid_trends.sinks.notify import Notifier, NullNotifier, WebhookNotifier
from covid_trends.sinks.trace import JSONLTraceSink, NullTraceSink, TraceRecord, TraceSink

__all__ = [
    "JSONLTraceSink",
    "Notifier",
    "NullNotifier",
    "NullTraceSink",
    "TraceRecord",
    "TraceSink",
    "WebhookNotifier",
]
