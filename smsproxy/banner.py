import platform
import sys

from .constants import APP_DESCRIPTION, APP_NAME, APP_VERSION

BOX_INNER_WIDTH = 64
CONFIG_VALUE_AT = 24  # coluna onde começam os valores


def pad_center(text: str, width: int) -> str:
    if len(text) >= width:
        return text[:width]
    pad = width - len(text)
    left = pad // 2
    return " " * left + text + " " * (pad - left)


def box_line(text: str) -> str:
    return "║" + pad_center(text, BOX_INNER_WIDTH) + "║"


def config_line(label: str, value) -> str:
    prefix = f"    • {label}:"
    return prefix + " " * max(1, CONFIG_VALUE_AT - len(prefix)) + str(value)


def build_banner(port, config, version: str = APP_VERSION):
    lines = [
        "",
        "╔" + "═" * BOX_INNER_WIDTH + "╗",
        box_line(APP_NAME),
        box_line(APP_DESCRIPTION),
        "╚" + "═" * BOX_INNER_WIDTH + "╝",
        "",
        f"  Version:        {version}",
        f"  Python version: {platform.python_version()}",
        f"  OS/Arch:        {sys.platform}/{platform.machine()}",
        "",
        "  Configuration:",
        config_line("Port", port),
        config_line("Sender", config.sender),
        config_line("Receivers", f"{len(config.receivers)} configured"),
        config_line("Max message len", f"{config.max_message_length} chars"),
        config_line("Send resolved", str(config.send_resolved).lower()),
        config_line("Auth method", "API Key (recommended)" if config.api_key else "Account SID/Token"),
        config_line("Log format", config.log_format or "simple"),
    ]
    # Campos opcionais só aparecem quando configurados
    if config.rate_limit > 0:
        lines.append(config_line("Rate limit", f"{config.rate_limit} req/min"))
    if config.message_prefix:
        lines.append(config_line("Message prefix", repr(config.message_prefix)))
    if config.twilio_base_url:
        lines.append(config_line("Twilio base URL", f"{config.twilio_base_url} (custom)"))
    if config.webhook_secret:
        lines.append(config_line("Webhook auth", "enabled (Bearer)"))
    if config.dry_run:
        lines.append(config_line("Dry-run", "enabled (no SMS sent)"))
    lines += ["", f"  Server listening on http://0.0.0.0:{port}", ""]
    return lines


def print_banner(port, config, version: str = APP_VERSION):
    print("\n".join(build_banner(port, config, version)), flush=True)
