# conexao/services/rate_limiter.py
"""
Rate limiting injetado nos serviços de denúncia e moderação.

O estado fica na instância que quem chama cria e repassa; não há mapa global.
Em produção com várias instâncias, basta implementar ``hit`` sobre um
armazenamento compartilhado.
"""
import logging
import threading
import time

from conexao.utils.security import rate_limit_key

logger = logging.getLogger(__name__)


class RateLimiter:
    """Interface: ``hit`` registra a tentativa e diz se ela é permitida"""

    def hit(self, actor_id, action):
        """
        Returns:
            tuple: (permitido, segundos até liberar)
        """
        raise NotImplementedError


class NullRateLimiter(RateLimiter):
    """Nunca limita (padrão dos serviços)"""

    def hit(self, actor_id, action):
        return True, 0.0


class WindowRateLimiter(RateLimiter):
    """Janela fixa por (ator, ação), em memória da instância"""

    def __init__(self, limits, clock=time.monotonic):
        """
        Args:
            limits (dict): ação -> (máximo de tentativas, janela em segundos)
            clock: Função de tempo (injetável nos testes)
        """
        self._limits = dict(limits)
        self._clock = clock
        self._windows = {}
        self._lock = threading.Lock()

    def hit(self, actor_id, action):
        if action not in self._limits:
            return True, 0.0

        max_attempts, window_seconds = self._limits[action]
        key = rate_limit_key(actor_id, action)
        now = self._clock()

        with self._lock:
            entry = self._windows.get(key)
            if entry is None or now >= entry['reset_at']:
                self._windows[key] = {'count': 1, 'reset_at': now + window_seconds}
                return True, 0.0

            if entry['count'] >= max_attempts:
                retry_after = entry['reset_at'] - now
                logger.warning(f"Rate limit atingido: {key} (libera em {retry_after:.0f}s)")
                return False, retry_after

            entry['count'] += 1
            return True, 0.0
