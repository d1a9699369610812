import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


class PayloadError(ValueError):
    """Corpo do webhook inválido (JSON malformado ou fora do formato do Alertmanager)."""


def _string_map(value: Any) -> Dict[str, str]:
    if not isinstance(value, dict):
        return {}
    return {str(k): "" if v is None else str(v) for k, v in value.items()}


@dataclass(frozen=True)
class Alert:
    status: str = ""
    labels: Dict[str, str] = field(default_factory=dict)
    annotations: Dict[str, str] = field(default_factory=dict)
    starts_at: Optional[str] = None

    @classmethod
    def from_dict(cls, raw: Any) -> "Alert":
        if not isinstance(raw, dict):
            raise PayloadError("alert entry must be a JSON object")
        starts_at = raw.get("startsAt")
        return cls(
            status=str(raw.get("status") or ""),
            labels=_string_map(raw.get("labels")),
            annotations=_string_map(raw.get("annotations")),
            starts_at=starts_at if isinstance(starts_at, str) else None,
        )

    def get_label(self, name: str) -> str:
        return self.labels.get(name, "")

    def get_annotation(self, name: str) -> str:
        return self.annotations.get(name, "")


@dataclass(frozen=True)
class WebhookPayload:
    status: str = ""
    alerts: List[Alert] = field(default_factory=list)

    @classmethod
    def from_json(cls, raw: bytes) -> "WebhookPayload":
        try:
            data = json.loads(raw)
        except (ValueError, UnicodeDecodeError) as exc:
            raise PayloadError(f"invalid JSON body: {exc}") from exc
        return cls.from_dict(data)

    @classmethod
    def from_dict(cls, data: Any) -> "WebhookPayload":
        if not isinstance(data, dict):
            raise PayloadError("webhook body must be a JSON object")
        alerts = data.get("alerts")
        if alerts is None:
            alerts = []
        if not isinstance(alerts, list):
            raise PayloadError("'alerts' must be an array")
        status = data.get("status")
        return cls(
            status=status if isinstance(status, str) else "",
            alerts=[Alert.from_dict(a) for a in alerts],
        )


@dataclass
class SendSummary:
    sent: int = 0
    failed: int = 0
    errors: List[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.failed == 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "sent": self.sent,
            "failed": self.failed,
            "errors": list(self.errors),
        }
