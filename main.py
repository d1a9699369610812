import logging
import sys

from smsproxy.banner import print_banner
from smsproxy.config import ConfigError, load_config
from smsproxy.constants import APP_NAME, APP_PORT, APP_VERSION, DEBUG_MODE
from smsproxy.controller import create_app

logging.basicConfig(
    level=logging.DEBUG if DEBUG_MODE else logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(APP_NAME)

config = load_config()
try:
    config.validate()
except ConfigError as exc:
    logger.error(f"startup: configuração inválida: {exc}")
    sys.exit(1)

app = create_app(config)

if __name__ == '__main__':
    print_banner(APP_PORT, config, APP_VERSION)
    logger.info(f"Servidor iniciado: {APP_NAME} {APP_VERSION} porta={APP_PORT}")
    app.run(host='0.0.0.0', port=APP_PORT, debug=DEBUG_MODE, use_reloader=False, threaded=True)
