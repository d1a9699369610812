import os


def int_env(name, default):
    # Valores inválidos, zero ou negativos caem no default
    try:
        value = int(os.getenv(name, ""))
    except ValueError:
        return default
    return value if value > 0 else default


# Credenciais e identidade da conta Twilio
TWILIO_ACCOUNT_SID = os.getenv("SID", "")
TWILIO_AUTH_TOKEN = os.getenv("TOKEN", "")
TWILIO_API_KEY = os.getenv("API_KEY", "")
TWILIO_API_KEY_SECRET = os.getenv("API_KEY_SECRET", "")
TWILIO_BASE_URL = os.getenv("TWILIO_BASE_URL", "")
SENDER = os.getenv("SENDER", "")
RECEIVERS = os.getenv("RECEIVER", "")

# Formatação da mensagem
SEND_RESOLVED = os.getenv("SEND_RESOLVED", "false").lower() == "true"
DEFAULT_MAX_MESSAGE_LENGTH = 150
MAX_MESSAGE_LENGTH = int_env("MAX_MESSAGE_LENGTH", DEFAULT_MAX_MESSAGE_LENGTH)
MESSAGE_PREFIX = os.getenv("MESSAGE_PREFIX", "")

# Proteções do endpoint /send
RATE_LIMIT = int_env("RATE_LIMIT", 0)  # requisições por minuto, 0 = desabilitado
WEBHOOK_SECRET = os.getenv("WEBHOOK_SECRET", "")
MAX_BODY_SIZE = 5 << 20  # 5 MiB

# Operação
DRY_RUN = os.getenv("DRY_RUN", "false").lower() == "true"
DISPATCH_MAX_WORKERS = int_env("DISPATCH_MAX_WORKERS", 64)
LOG_FORMAT = os.getenv("LOG_FORMAT", "").strip().lower()
APP_PORT = int_env("PORT", 9090)
DEBUG_MODE = os.getenv("DEBUG_MODE", "False").lower() == "true"

APP_NAME = "proxy-alertmanager-sms"
APP_DESCRIPTION = "Prometheus Alertmanager -> Twilio SMS proxy"
APP_VERSION = os.getenv("APP_VERSION", "1.0.0")
