"""Debounce: adia a propagação de um valor até ele parar de mudar.

Cada chamada cancela o temporizador pendente e agenda outro; o callback roda
uma única vez, com o último valor, depois do intervalo sem novas chamadas.
"""
import logging
import threading

logger = logging.getLogger(__name__)


def _timer_daemon(intervalo, funcao, args):
    timer = threading.Timer(intervalo, funcao, args=args)
    timer.daemon = True
    return timer


class Debouncer:

    def __init__(self, intervalo, callback, criar_timer=_timer_daemon):
        self.intervalo = intervalo  # Segundos de silêncio antes de disparar
        self.callback = callback
        self._criar_timer = criar_timer
        self._timer = None
        self._geracao = 0
        self._lock = threading.Lock()

    def chamar(self, valor):
        if self.intervalo <= 0:
            self.callback(valor)
            return
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._geracao += 1
            self._timer = self._criar_timer(self.intervalo, self._disparar, (self._geracao, valor))
            self._timer.start()

    def _disparar(self, geracao, valor):
        with self._lock:
            # Um timer substituído pode disparar se o cancel chegou tarde
            if geracao != self._geracao or self._timer is None:
                return
            self._timer = None
        logger.debug('Debounce aplicado: %r', valor)
        self.callback(valor)

    def cancelar(self):
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._geracao += 1

    @property
    def pendente(self):
        return self._timer is not None
