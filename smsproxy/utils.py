import re
from datetime import datetime, timedelta, timezone
from typing import List, Mapping, Optional

# $labels.xxx nas annotations; nomes fora de [a-zA-Z_][a-zA-Z0-9_]* nunca casam
LABEL_PLACEHOLDER = re.compile(r'\$labels\.([a-zA-Z_][a-zA-Z0-9_]*)')

_RFC3339 = re.compile(
    r'^(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?(Z|[+-]\d{2}:\d{2})$'
)

TRUNCATION_MARKER = "..."


def is_blank(value) -> bool:
    return value is None or str(value).strip() == ""


def parse_receivers(receivers: Optional[str]) -> List[str]:
    if not receivers:
        return []
    return [r.strip() for r in receivers.split(",") if r.strip()]


def find_and_replace_labels(text: str, labels: Optional[Mapping[str, str]]) -> str:
    """
    Substitui cada $labels.<nome> pelo valor do label (ou vazio se ausente).
    Passada única: o valor substituído nunca é reprocessado.
    """
    labels = labels or {}
    return LABEL_PLACEHOLDER.sub(lambda m: str(labels.get(m.group(1), "")), text)


def truncate_message(message: str, max_len: int) -> str:
    """
    Limita a mensagem a max_len bytes (UTF-8), terminando com "..." quando corta.
    Com max_len <= 3 corta sem o sufixo. O corte é por byte: um caractere
    multi-byte partido na fronteira é descartado por inteiro.
    """
    raw = message.encode("utf-8")
    if len(raw) <= max_len:
        return message
    if max_len <= 3:
        return raw[:max(max_len, 0)].decode("utf-8", errors="ignore")
    keep = max_len - len(TRUNCATION_MARKER)
    return raw[:keep].decode("utf-8", errors="ignore") + TRUNCATION_MARKER


def parse_rfc3339(value) -> Optional[datetime]:
    if not isinstance(value, str):
        return None
    match = _RFC3339.fullmatch(value)
    if not match:
        return None
    year, month, day, hour, minute, second, fraction, zone = match.groups()
    # Alertmanager manda nanossegundos; datetime só guarda micro
    micro = int((fraction or "0")[:6].ljust(6, "0"))
    if zone == "Z":
        tz = timezone.utc
    else:
        sign = 1 if zone[0] == "+" else -1
        tz = timezone(sign * timedelta(hours=int(zone[1:3]), minutes=int(zone[4:6])))
    try:
        return datetime(int(year), int(month), int(day), int(hour), int(minute), int(second), micro, tzinfo=tz)
    except ValueError:
        return None


def format_rfc1123(dt: datetime) -> str:
    """Formato 'Mon, 02 Jan 2006 15:04:05 MST'; zona UTC ou offset numérico."""
    offset = dt.utcoffset()
    if not offset:
        zone = "UTC"
    else:
        zone = dt.strftime("%z")
    return dt.strftime("%a, %d %b %Y %H:%M:%S ") + zone
