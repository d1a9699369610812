"""
Contadores Prometheus do proxy.

Cada instância tem o seu próprio CollectorRegistry, para que apps criados em
testes não compartilhem estado.
"""
from typing import Dict, Optional

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Counter, generate_latest

METRIC_PREFIX = "smsproxy"


class Metrics:
    content_type = CONTENT_TYPE_LATEST

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry(auto_describe=True)
        self.alerts_processed = Counter(
            f"{METRIC_PREFIX}_alerts_processed",
            "Total number of alert batches processed via POST /send.",
            registry=self.registry,
        )
        self.sms_sent = Counter(
            f"{METRIC_PREFIX}_sms_sent",
            "Total SMS messages sent successfully.",
            registry=self.registry,
        )
        self.sms_failed = Counter(
            f"{METRIC_PREFIX}_sms_failed",
            "Total SMS messages that failed to send.",
            registry=self.registry,
        )

    def inc_alerts_processed(self):
        self.alerts_processed.inc()

    def inc_sms_sent(self):
        self.sms_sent.inc()

    def inc_sms_failed(self):
        self.sms_failed.inc()

    def snapshot(self) -> Dict[str, int]:
        def value(name):
            return int(self.registry.get_sample_value(f"{METRIC_PREFIX}_{name}_total") or 0)

        return {
            "alerts_processed": value("alerts_processed"),
            "sms_sent": value("sms_sent"),
            "sms_failed": value("sms_failed"),
        }

    def render(self) -> bytes:
        return generate_latest(self.registry)
