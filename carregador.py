"""Carga em duas fases dos dados do serviço de estoque.

1. Busca a primeira página de produtos e publica assim que ela chega.
2. Busca em paralelo todos os produtos e todas as movimentações; quando as
   duas respostas chegam, elas substituem a página rápida.

Qualquer falha vira um estado de erro terminal, sem nova tentativa. Cada
carga leva um número de geração: iniciar outra carga ou cancelar faz com que
as respostas da anterior sejam descartadas pelo redutor.
"""
import itertools
import logging
import threading

import estado as est
from excecoes import ErroApi

logger = logging.getLogger(__name__)


class Carregador:

    def __init__(self, store, cliente, executor, itens_por_pagina=30, limite_total=10000):
        self.store = store
        self.cliente = cliente
        self.executor = executor
        self.itens_por_pagina = itens_por_pagina
        self.limite_total = limite_total
        self._geracoes = itertools.count(store.estado.geracao + 1)
        self._lock = threading.Lock()

    def _nova_geracao(self):
        with self._lock:
            return next(self._geracoes)

    def iniciar(self):
        """Dispara a carga em segundo plano e devolve o Future da execução completa"""
        geracao = self._nova_geracao()
        self.store.despachar(est.INICIAR_CARGA, geracao=geracao)
        logger.info('Iniciando carga de dados (geração %s)', geracao)
        return self.executor.submit(self._carregar, geracao)

    def cancelar(self):
        """Invalida a carga em andamento; respostas atrasadas não alteram mais o estado"""
        geracao = self._nova_geracao()
        self.store.despachar(est.CARGA_CANCELADA, geracao=geracao)

    def _carregar(self, geracao):
        try:
            primeira = self.cliente.listar_produtos(1, self.itens_por_pagina)
            self.store.despachar(est.PRIMEIRA_PAGINA, geracao=geracao, produtos=primeira)
            logger.info('Primeira página carregada: %s produtos', len(primeira))

            # Movimentações em paralelo; produtos completos nesta mesma thread
            futuro_movs = self.executor.submit(self.cliente.listar_movimentacoes)
            produtos = self.cliente.listar_todos_produtos(self.limite_total)
            movimentacoes = futuro_movs.result()
        except ErroApi as e:
            logger.error('Falha ao buscar dados: %s', e)
            self.store.despachar(est.FALHA_CARGA, geracao=geracao, mensagem=est.MENSAGEM_ERRO_CARGA)
            return False

        self.store.despachar(
            est.DADOS_COMPLETOS,
            geracao=geracao,
            produtos=produtos,
            movimentacoes=movimentacoes,
        )
        logger.info('Dados completos carregados: %s produtos, %s movimentações', len(produtos), len(movimentacoes))
        return True
