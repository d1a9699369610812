from .constants import DEFAULT_MAX_MESSAGE_LENGTH
from .models import Alert
from .utils import find_and_replace_labels, format_rfc1123, is_blank, parse_rfc3339, truncate_message


class MessageFormatError(ValueError):
    pass


def select_source_text(alert: Alert) -> str:
    summary = alert.get_annotation("summary")
    if not is_blank(summary):
        return summary
    description = alert.get_annotation("description")
    if not is_blank(description):
        return description
    raise MessageFormatError("alert missing summary and description annotations")


def format_message(alert: Alert, status: str, config) -> str:
    """
    Monta o corpo do SMS para um alerta:
    <prefixo> RESOLVED: [<alertname>] "<texto>" alert starts at <RFC1123>

    - texto: summary, ou description como fallback (ambos vazios -> MessageFormatError)
    - placeholders $labels.xxx substituídos pelos labels do alerta
    - startsAt ausente ou inválido: texto sem aspas e sem sufixo
    - o truncamento é sempre o último passo, depois de todos os prefixos
    """
    body = find_and_replace_labels(select_source_text(alert), alert.labels)

    started = parse_rfc3339(alert.starts_at)
    if started is not None:
        body = f'"{body}" alert starts at {format_rfc1123(started)}'

    alert_name = alert.get_label("alertname")
    if not is_blank(alert_name):
        body = f"[{alert_name}] {body}"

    if status == "resolved":
        body = "RESOLVED: " + body

    prefix = getattr(config, "message_prefix", "") or ""
    if prefix:
        body = f"{prefix} {body}"

    max_len = getattr(config, "max_message_length", 0) or 0
    if max_len <= 0:
        max_len = DEFAULT_MAX_MESSAGE_LENGTH
    return truncate_message(body, max_len)
