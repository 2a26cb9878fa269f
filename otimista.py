"""Atualização otimista de um campo de produto.

Funciona como uma pequena transação:
  1. guarda o valor anterior,
  2. aplica o valor novo no estado local imediatamente,
  3. confirma no servidor em segundo plano,
  4. em caso de falha restaura o valor anterior e avisa o usuário.
"""
import logging

import estado as est
from excecoes import ErroApi

logger = logging.getLogger(__name__)


class TransacaoOtimista:

    def __init__(self, store, produto_id, campo, valor_anterior, valor_novo, mensagem_falha=None):
        self.store = store
        self.produto_id = produto_id
        self.campo = campo
        self.valor_anterior = valor_anterior  # Snapshot restaurado em caso de falha
        self.valor_novo = valor_novo
        self.mensagem_falha = mensagem_falha

    def aplicar(self):
        self._gravar(self.valor_novo)

    def reverter(self):
        self._gravar(self.valor_anterior)
        if self.mensagem_falha:
            self.store.despachar(est.AVISO_EMITIDO, mensagem=self.mensagem_falha)

    def _gravar(self, valor):
        self.store.despachar(est.CAMPO_PRODUTO_ALTERADO, id=self.produto_id, campo=self.campo, valor=valor)

    def executar(self, executor, confirmar):
        """Aplica já e envia `confirmar()` ao executor; devolve o Future (True se confirmado)"""
        self.aplicar()
        return executor.submit(self._confirmar, confirmar)

    def _confirmar(self, confirmar):
        try:
            confirmar()
        except ErroApi as e:
            logger.error('Falha ao salvar %s do produto %s: %s', self.campo, self.produto_id, e)
            self.reverter()
            return False
        # Sucesso: o valor otimista passa a valer
        return True
