import hmac
import logging
import time
from datetime import datetime, timedelta

from flask import Flask, Response, g, jsonify, request

from .config import Config
from .constants import APP_NAME, APP_VERSION, DEBUG_MODE, MAX_BODY_SIZE
from .dispatcher import Dispatcher
from .metrics import Metrics
from .models import PayloadError, WebhookPayload
from .ratelimit import RateLimiter
from .services import TwilioClient
from .utils import parse_receivers

logger = logging.getLogger(__name__)
access_logger = logging.getLogger(f"{__name__}.access")

JSON_MIMETYPE = "application/json"


def _read_body(stream, limit):
    # Corpo acima do limite é truncado; o parse do JSON truncado falha depois
    chunks = []
    remaining = limit
    while remaining > 0:
        chunk = stream.read(min(remaining, 64 * 1024))
        if not chunk:
            break
        chunks.append(chunk)
        remaining -= len(chunk)
    return b"".join(chunks)


def _format_uptime(started_at: float) -> str:
    return str(timedelta(seconds=round(time.time() - started_at)))


def create_app(config: Config = None, client=None, metrics: Metrics = None, version: str = APP_VERSION):
    config = config or Config()
    client = client or TwilioClient.from_config(config)
    metrics = metrics or Metrics()

    app = Flask(__name__)
    # Estado por instância do app (nada de singletons de módulo)
    rate_limiter = RateLimiter(config.rate_limit) if config.rate_limit > 0 else None
    dispatcher = Dispatcher(client, config, metrics)
    started_at = time.time()

    app.extensions["smsproxy"] = {
        "config": config,
        "client": client,
        "metrics": metrics,
        "dispatcher": dispatcher,
        "rate_limiter": rate_limiter,
    }

    @app.before_request
    def start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def log_request(response):
        started = g.get("request_started")
        duration = time.perf_counter() - started if started is not None else 0.0
        size = response.calculate_content_length() or 0
        if config.log_format == "nginx":
            access_logger.info(
                '%s - - [%s] "%s %s %s" %d %d "%s" "%s" "%s"',
                request.remote_addr or "-",
                datetime.now().astimezone().strftime("%d/%b/%Y:%H:%M:%S %z"),
                request.method,
                request.full_path.rstrip("?"),
                request.environ.get("SERVER_PROTOCOL", "HTTP/1.1"),
                response.status_code,
                size,
                request.referrer or "-",
                request.user_agent.string or "-",
                request.headers.get("X-Forwarded-For") or "-",
            )
        else:
            access_logger.info(
                "http request method=%s path=%s status=%d bytes=%d duration=%.3fms",
                request.method,
                request.full_path.rstrip("?"),
                response.status_code,
                size,
                duration * 1000,
            )
        return response

    @app.route('/', methods=['GET'])
    def ping():
        return Response("ping", mimetype="text/plain")

    @app.route('/health', methods=['GET'])
    def health():
        return {
            'status': 'ok',
            'service': APP_NAME,
            'version': version,
            'uptime': _format_uptime(started_at),
        }, 200

    @app.route('/metrics', methods=['GET'])
    def prometheus_metrics():
        return Response(metrics.render(), headers={"Content-Type": metrics.content_type})

    @app.route('/send', methods=['POST'])
    def send():
        if rate_limiter is not None and not rate_limiter.allow():
            logger.warning(f"Rate limit excedido: {request.method} {request.path}")
            return Response("rate limit exceeded", status=429, mimetype="text/plain")

        if config.webhook_secret and not _authorized(request.headers.get("Authorization", ""), config.webhook_secret):
            logger.warning(f"Webhook sem autorização válida de {request.remote_addr}")
            return Response("unauthorized", status=401, mimetype="text/plain",
                            headers={"WWW-Authenticate": "Bearer"})

        if request.mimetype != JSON_MIMETYPE:
            return Response("Content-Type must be application/json", status=406, mimetype="text/plain")

        try:
            raw = _read_body(request.stream, MAX_BODY_SIZE)
            if DEBUG_MODE:
                logger.debug(f"Received data: {raw[:500]!r}")

            try:
                payload = WebhookPayload.from_json(raw)
            except PayloadError as exc:
                logger.warning(f"Payload inválido: {exc}")
                return Response(f"invalid request body: {exc}", status=400, mimetype="text/plain")

            receivers = config.receivers
            receiver_param = request.args.get("receiver", "")
            if receiver_param:
                receivers = parse_receivers(receiver_param)
            if not receivers:
                logger.error("Bad request: receiver not specified")
                return Response("receiver not specified", status=400, mimetype="text/plain")

            metrics.inc_alerts_processed()
            summary = dispatcher.dispatch(payload, receivers)
            return jsonify(summary.to_dict()), (200 if summary.success else 500)
        except Exception as e:
            logger.exception(f"Erro ao processar /send: {e}")
            return jsonify({'success': False, 'error': str(e)}), 500

    return app


def _authorized(header: str, secret: str) -> bool:
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token:
        return False
    return hmac.compare_digest(token.strip().encode("utf-8"), secret.encode("utf-8"))
