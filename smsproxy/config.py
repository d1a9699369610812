import os
from typing import List, Optional, Tuple
from urllib.parse import urlparse

from . import constants
from .utils import parse_receivers

LOG_FORMATS = {"", "simple", "nginx"}


class ConfigError(ValueError):
    pass


class Config:
    """
    Configuração consumida pelo proxy.
    Os defaults vêm das variáveis de ambiente lidas em constants; testes
    constroem instâncias independentes passando os valores diretamente.
    """

    def __init__(
        self,
        account_sid: str = constants.TWILIO_ACCOUNT_SID,
        auth_token: str = constants.TWILIO_AUTH_TOKEN,
        api_key: str = constants.TWILIO_API_KEY,
        api_key_secret: str = constants.TWILIO_API_KEY_SECRET,
        sender: str = constants.SENDER,
        receivers: Optional[List[str]] = None,
        send_resolved: bool = constants.SEND_RESOLVED,
        max_message_length: int = constants.MAX_MESSAGE_LENGTH,
        message_prefix: str = constants.MESSAGE_PREFIX,
        rate_limit: int = constants.RATE_LIMIT,
        dry_run: bool = constants.DRY_RUN,
        twilio_base_url: str = constants.TWILIO_BASE_URL,
        webhook_secret: str = constants.WEBHOOK_SECRET,
        log_format: str = constants.LOG_FORMAT,
        max_workers: int = constants.DISPATCH_MAX_WORKERS,
    ):
        self.account_sid = account_sid
        self.auth_token = auth_token
        self.api_key = api_key
        self.api_key_secret = api_key_secret
        self.sender = sender
        self.receivers = list(receivers) if receivers is not None else parse_receivers(constants.RECEIVERS)
        self.send_resolved = send_resolved
        self.max_message_length = max_message_length
        self.message_prefix = message_prefix
        self.rate_limit = rate_limit
        self.dry_run = dry_run
        self.twilio_base_url = twilio_base_url
        self.webhook_secret = webhook_secret
        self.log_format = log_format
        self.max_workers = max_workers

    @property
    def uses_api_key(self) -> bool:
        return bool(self.api_key and self.api_key_secret)

    def auth_credentials(self) -> Tuple[str, str]:
        """Par do HTTP Basic: API Key tem precedência sobre SID/Token."""
        if self.uses_api_key:
            return self.api_key, self.api_key_secret
        return self.account_sid, self.auth_token

    def validate(self):
        if not self.account_sid:
            raise ConfigError("SID (account SID) is required")
        if not self.sender:
            raise ConfigError("SENDER is required")
        if bool(self.api_key) != bool(self.api_key_secret):
            raise ConfigError("API_KEY and API_KEY_SECRET must be set together")
        if not self.auth_token and not self.uses_api_key:
            raise ConfigError("either TOKEN or API_KEY/API_KEY_SECRET is required")
        if self.log_format not in LOG_FORMATS:
            raise ConfigError(f"LOG_FORMAT must be 'simple' or 'nginx', got {self.log_format!r}")
        if self.twilio_base_url:
            parsed = urlparse(self.twilio_base_url)
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                raise ConfigError(f"TWILIO_BASE_URL is not a valid http(s) URL: {self.twilio_base_url!r}")


def load_config() -> Config:
    """Lê o ambiente no momento da chamada (constants é congelado no import)."""
    return Config(
        account_sid=os.getenv("SID", ""),
        auth_token=os.getenv("TOKEN", ""),
        api_key=os.getenv("API_KEY", ""),
        api_key_secret=os.getenv("API_KEY_SECRET", ""),
        sender=os.getenv("SENDER", ""),
        receivers=parse_receivers(os.getenv("RECEIVER", "")),
        send_resolved=os.getenv("SEND_RESOLVED", "false").lower() == "true",
        max_message_length=constants.int_env("MAX_MESSAGE_LENGTH", constants.DEFAULT_MAX_MESSAGE_LENGTH),
        message_prefix=os.getenv("MESSAGE_PREFIX", ""),
        rate_limit=constants.int_env("RATE_LIMIT", 0),
        dry_run=os.getenv("DRY_RUN", "false").lower() == "true",
        twilio_base_url=os.getenv("TWILIO_BASE_URL", ""),
        webhook_secret=os.getenv("WEBHOOK_SECRET", ""),
        log_format=os.getenv("LOG_FORMAT", "").strip().lower(),
        max_workers=constants.int_env("DISPATCH_MAX_WORKERS", 64),
    )
