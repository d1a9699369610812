import threading
import time
from typing import Callable

RATE_LIMIT_WINDOW_SECONDS = 60.0


class RateLimiter:
    """
    Janela fixa: a cada janela os tokens voltam ao máximo.
    O reset é preguiçoso (avaliado na chamada de allow), sem thread de fundo.
    Uma rajada no fim de uma janela seguida de outra no início da próxima passa.
    """

    def __init__(self, max_requests: int, window_seconds: float = RATE_LIMIT_WINDOW_SECONDS,
                 clock: Callable[[], float] = time.monotonic):
        self.max = max(0, int(max_requests))
        self.window = window_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self.tokens = self.max
        self.window_start = clock()

    def allow(self) -> bool:
        with self._lock:
            now = self._clock()
            if (now - self.window_start) >= self.window:
                self.tokens = self.max
                self.window_start = now
            if self.tokens <= 0:
                return False
            self.tokens -= 1
            return True
