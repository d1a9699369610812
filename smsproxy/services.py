import logging
import time
from typing import Callable, Optional

import requests
from urllib3.exceptions import ReadTimeoutError

from .constants import DEBUG_MODE

logger = logging.getLogger(__name__)

DEFAULT_TWILIO_BASE_URL = "https://api.twilio.com"
TWILIO_REQUEST_TIMEOUT_SECONDS = 30
# Espera antes de cada tentativa (1ª, 2ª, 3ª); linear e fixo, não exponencial
TWILIO_BACKOFF_SECONDS = (0, 1, 2)
TWILIO_MAX_ATTEMPTS = len(TWILIO_BACKOFF_SECONDS)


class TwilioError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None, retryable: bool = False):
        super().__init__(message)
        self.status_code = status_code
        self.retryable = retryable


class TwilioClient:
    """
    Envia SMS via chamada HTTP direta à API REST da Twilio.
    account_sid monta a URL; auth_user/auth_password vão no HTTP Basic
    (API Key SID/secret ou Account SID/Auth Token).
    """

    def __init__(self, account_sid: str, auth_user: str, auth_password: str, base_url: str = "",
                 timeout: float = TWILIO_REQUEST_TIMEOUT_SECONDS, sleep: Callable[[float], None] = time.sleep):
        self.account_sid = account_sid
        self.auth = (auth_user, auth_password)
        self.base_url = (base_url or DEFAULT_TWILIO_BASE_URL).rstrip('/')
        self.timeout = timeout
        self._sleep = sleep

    @classmethod
    def from_config(cls, config) -> "TwilioClient":
        user, password = config.auth_credentials()
        return cls(config.account_sid, user, password, config.twilio_base_url)

    @property
    def messages_url(self) -> str:
        return f"{self.base_url}/2010-04-01/Accounts/{self.account_sid}/Messages.json"

    def send_message(self, to: str, sender: str, body: str):
        """
        Retenta em 429, 5xx, timeout e falha de leitura da resposta, até 3 tentativas.
        Outros 4xx e falhas de conexão falham na hora. Levanta TwilioError com o
        último erro observado.
        """
        payload = {"To": to, "From": sender, "Body": body}
        last_error: Optional[TwilioError] = None

        for attempt in range(TWILIO_MAX_ATTEMPTS):
            delay = TWILIO_BACKOFF_SECONDS[attempt]
            if delay:
                logger.warning(f"Twilio: tentativa {attempt + 1}/{TWILIO_MAX_ATTEMPTS} para {to} em {delay}s ({last_error})")
                self._sleep(delay)

            try:
                last_error = self._attempt(payload)
            except TwilioError as exc:
                last_error = exc
            if last_error is None:
                return
            if not last_error.retryable:
                raise last_error

        raise last_error

    def _attempt(self, payload) -> Optional[TwilioError]:
        try:
            resp = requests.post(self.messages_url, data=payload, auth=self.auth, timeout=self.timeout)
        except requests.exceptions.Timeout as exc:
            return TwilioError(f"twilio: failed to send HTTP request: {exc}", retryable=True)
        except (requests.exceptions.ChunkedEncodingError, requests.exceptions.ContentDecodingError) as exc:
            return TwilioError(f"twilio: failed to read response: {exc}", retryable=True)
        except requests.exceptions.ConnectionError as exc:
            # timeout lendo o corpo chega como ConnectionError(ReadTimeoutError)
            if _is_read_timeout(exc):
                return TwilioError(f"twilio: failed to read response: {exc}", retryable=True)
            raise TwilioError(f"twilio: failed to send HTTP request: {exc}") from exc
        except requests.exceptions.RequestException as exc:
            raise TwilioError(f"twilio: failed to send HTTP request: {exc}") from exc

        if DEBUG_MODE:
            logger.debug(f"Twilio response: {resp.status_code} {resp.text[:500]}")

        if 200 <= resp.status_code < 300:
            return None

        retryable = resp.status_code == 429 or resp.status_code >= 500
        return TwilioError(
            f"twilio: API error (status {resp.status_code}): {resp.text}",
            status_code=resp.status_code,
            retryable=retryable,
        )


def _is_read_timeout(exc: requests.exceptions.ConnectionError) -> bool:
    reason = exc.args[0] if exc.args else None
    return isinstance(reason, ReadTimeoutError) or isinstance(exc.__cause__ or exc.__context__, ReadTimeoutError)
