import logging
import threading
from concurrent.futures import ThreadPoolExecutor, wait
from typing import List, Optional

from .formatters import format_message
from .models import Alert, SendSummary, WebhookPayload

logger = logging.getLogger(__name__)


class Dispatcher:
    """
    Distribui cada alerta do webhook para cada receiver.

    Uma unidade de trabalho por par (alerta, receiver): formata e envia.
    Unidades rodam em paralelo e são independentes; a falha de uma não afeta
    as outras. Contadores e lista de erros ficam sob um único lock, que nunca
    é segurado durante I/O de rede.

    O pool tem no máximo config.max_workers threads (DISPATCH_MAX_WORKERS).
    Com mais pares que isso, os excedentes esperam na fila: uma unidade presa
    em retentativas (até ~93s) atrasa o início dos pares enfileirados, embora
    nunca altere o resultado deles.
    """

    def __init__(self, client, config, metrics=None):
        self.client = client
        self.config = config
        self.metrics = metrics

    def should_dispatch(self, status: str) -> bool:
        if status == "firing":
            return True
        return status == "resolved" and bool(self.config.send_resolved)

    def dispatch(self, payload: WebhookPayload, receivers: List[str]) -> SendSummary:
        summary = SendSummary()
        if not self.should_dispatch(payload.status):
            logger.debug(f"Ignorando webhook com status '{payload.status}' (send_resolved={self.config.send_resolved})")
            return summary

        units = [(alert, receiver) for alert in payload.alerts for receiver in receivers]
        if not units:
            return summary

        lock = threading.Lock()

        def record(receiver: str, error: Optional[Exception]):
            with lock:
                if error is None:
                    summary.sent += 1
                else:
                    summary.failed += 1
                    summary.errors.append(f"Failed to send to {receiver}: {error}")
            if self.metrics is not None:
                if error is None:
                    self.metrics.inc_sms_sent()
                else:
                    self.metrics.inc_sms_failed()

        workers = max(1, min(len(units), self.config.max_workers or len(units)))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="dispatch") as executor:
            # alert/receiver vão como argumentos do submit: cada unidade tem os seus
            futures = [
                executor.submit(self._run_unit, alert, receiver, payload.status, record)
                for alert, receiver in units
            ]
            wait(futures)

        logger.info(f"Dispatch concluído: sent={summary.sent} failed={summary.failed}")
        return summary

    def _run_unit(self, alert: Alert, receiver: str, status: str, record):
        try:
            self.deliver(alert, receiver, status)
        except Exception as exc:
            logger.error(f"Falha ao enviar SMS para {receiver}: {exc}")
            record(receiver, exc)
        else:
            record(receiver, None)

    def deliver(self, alert: Alert, receiver: str, status: str):
        body = format_message(alert, status, self.config)
        if self.config.dry_run:
            logger.info(f"[DRY-RUN] SMS para {receiver} (from {self.config.sender}): {body}")
            return
        self.client.send_message(receiver, self.config.sender, body)
        logger.info(f"SMS enviado para {receiver}")
