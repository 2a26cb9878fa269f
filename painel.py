"""Painel: liga o estado da interface ao serviço de estoque.

As telas só conversam com o Painel. Ele aplica filtros e paginação sobre o
cache local, envia as escritas ao serviço e reconcilia o cache com a
representação devolvida pelo servidor (nunca com um valor calculado aqui).
A única escrita otimista é a marcação de prioridade.
"""
import logging
import threading
from collections import namedtuple
from concurrent.futures import ThreadPoolExecutor

import estado as est
import filtros
from carregador import Carregador
from debounce import Debouncer
from excecoes import ErroApi, ErroValidacao, OperacaoNaoPermitida
from models import AJUSTE, TIPOS
from otimista import TransacaoOtimista
from paginacao import Pagina, pagina_valida, total_paginas

logger = logging.getLogger(__name__)

MENSAGEM_FALHA_PRIORIDADE = 'Não foi possível salvar a alteração de prioridade. Verifique sua conexão.'
MENSAGEM_QUANTIDADE_INVALIDA = 'A quantidade deve ser maior que zero.'
MOVIMENTACOES_RECENTES = 10
OPCOES_POR_PAGINA = (30, 70, 100)

VisaoEstoque = namedtuple('VisaoEstoque', ['estado', 'pagina', 'categorias', 'locais', 'recentes', 'produtos_por_id'])
VisaoMovimentacoes = namedtuple('VisaoMovimentacoes', ['pagina', 'produtos_por_id', 'categorias'])


class Painel:

    def __init__(self, cliente, executor=None, itens_por_pagina=30, limite_total=10000,
                 debounce_ms=500, max_workers=4, criar_timer=None, store=None):
        self.cliente = cliente
        self.store = store or est.Store()
        # A carga ocupa uma thread e espera outra: são necessárias pelo menos duas
        self.executor = executor or ThreadPoolExecutor(max_workers=max(max_workers, 2), thread_name_prefix='painel')
        self.itens_por_pagina = itens_por_pagina
        self.carregador = Carregador(self.store, cliente, self.executor, itens_por_pagina, limite_total)
        opcoes_timer = {'criar_timer': criar_timer} if criar_timer else {}
        self.debouncer = Debouncer(debounce_ms / 1000.0, self._aplicar_busca, **opcoes_timer)
        self._lock_busca = threading.Lock()
        self._ultima_sequencia = None

    @classmethod
    def from_config(cls, config, cliente, executor=None):
        return cls(
            cliente,
            executor=executor,
            itens_por_pagina=config['ITENS_POR_PAGINA'],
            limite_total=config['LIMITE_TODOS_PRODUTOS'],
            debounce_ms=config['DEBOUNCE_MS'],
            max_workers=config['MAX_WORKERS'],
        )

    @property
    def estado(self):
        return self.store.estado

    # --- Ciclo de vida ---

    def iniciar(self):
        return self.carregador.iniciar()

    def encerrar(self):
        self.debouncer.cancelar()
        self.carregador.cancelar()
        self.executor.shutdown(wait=False, cancel_futures=True)

    # --- Consultas ---

    def produto(self, produto_id):
        estado = self.estado
        for produto in estado.produtos + estado.primeira_pagina:
            if produto.id == produto_id:
                return produto
        return None

    def movimentacao(self, movimentacao_id):
        for mov in self.estado.movimentacoes:
            if mov.id == movimentacao_id:
                return mov
        return None

    def produtos_por_id(self):
        estado = self.estado
        return {p.id: p for p in estado.primeira_pagina + estado.produtos}

    def criterios(self, estado=None):
        estado = estado or self.estado
        return filtros.CriteriosEstoque(
            busca=estado.busca_aplicada,
            categoria=estado.categoria,
            abaixo_minimo=estado.abaixo_minimo,
            prioritarios=estado.prioritarios,
        )

    def produtos_filtrados(self, estado=None):
        estado = estado or self.estado
        return filtros.filtrar_produtos(estado.base_produtos, self.criterios(estado))

    def visao_estoque(self):
        filtrados = self.produtos_filtrados()
        # Mudou a quantidade de itens filtrados: volta para a página 1
        estado = self.store.despachar(est.TOTAL_FILTRADO, total=len(filtrados))
        return VisaoEstoque(
            estado=estado,
            pagina=Pagina(filtrados, estado.pagina, self.itens_por_pagina),
            categorias=filtros.categorias(estado.produtos),
            locais=filtros.locais_armazenamento(estado.produtos),
            recentes=estado.movimentacoes[:MOVIMENTACOES_RECENTES],
            produtos_por_id=self.produtos_por_id(),
        )

    def visao_movimentacoes(self, data_inicio=None, data_fim=None, categoria='', por_pagina=30, pagina=1):
        if por_pagina not in OPCOES_POR_PAGINA:
            por_pagina = OPCOES_POR_PAGINA[0]
        produtos_por_id = self.produtos_por_id()
        filtradas = filtros.filtrar_movimentacoes(
            self.estado.movimentacoes, produtos_por_id, data_inicio, data_fim, categoria,
        )
        return VisaoMovimentacoes(
            pagina=Pagina(filtradas, pagina, por_pagina),
            produtos_por_id=produtos_por_id,
            categorias=filtros.categorias(self.estado.produtos),
        )

    def consumir_avisos(self):
        return self.store.consumir_avisos()

    # --- Filtros e paginação ---

    def digitar_busca(self, texto, sequencia=None):
        """Registra o texto digitado. Devolve False se chegou depois de um envio mais novo."""
        with self._lock_busca:
            if sequencia is not None:
                if self._ultima_sequencia is not None and sequencia <= self._ultima_sequencia:
                    logger.debug('Busca fora de ordem descartada: %s', sequencia)
                    return False
                self._ultima_sequencia = sequencia
            self.store.despachar(est.BUSCA_DIGITADA, texto=texto)
            self.debouncer.chamar(texto)
        return True

    def _aplicar_busca(self, texto):
        self.store.despachar(est.BUSCA_APLICADA, texto=texto)

    def filtrar_categoria(self, categoria):
        if categoria != self.estado.categoria:
            self.store.despachar(est.CATEGORIA_FILTRADA, categoria=categoria)

    def filtrar_abaixo_minimo(self, ativo):
        if bool(ativo) != self.estado.abaixo_minimo:
            self.store.despachar(est.ABAIXO_MINIMO_FILTRADO, ativo=ativo)

    def filtrar_prioritarios(self, ativo):
        if bool(ativo) != self.estado.prioritarios:
            self.store.despachar(est.PRIORITARIOS_FILTRADO, ativo=ativo)

    def ir_para_pagina(self, destino):
        """Troca de página; destino fora da faixa ou igual ao atual não faz nada"""
        estado = self.estado
        paginas = total_paginas(len(self.produtos_filtrados(estado)), self.itens_por_pagina)
        if not pagina_valida(destino, estado.pagina, paginas):
            return False
        self.store.despachar(est.PAGINA_ALTERADA, pagina=destino)
        return True

    # --- Produtos ---

    def criar_produto(self, dados):
        if not (dados.get('nome') or '').strip():
            raise ErroValidacao('O nome do produto é obrigatório.')
        if dados.get('quantidade', 0) < 0:
            raise ErroValidacao('A quantidade inicial não pode ser negativa.')
        try:
            produto = self.cliente.criar_produto(dados)
        except ErroApi:
            logger.exception('Falha ao criar produto')
            return None
        self.store.despachar(est.PRODUTO_CRIADO, produto=produto)
        return produto

    def atualizar_produto(self, produto_id, patch):
        # Quantidade e SKU só mudam no servidor
        patch = {k: v for k, v in patch.items() if k not in ('quantidade', 'sku', 'id')}
        try:
            produto = self.cliente.atualizar_produto(produto_id, patch)
        except ErroApi:
            logger.exception('Falha ao atualizar produto %s', produto_id)
            return None
        self.store.despachar(est.PRODUTO_SUBSTITUIDO, produto=produto)
        return produto

    def excluir_produto(self, produto_id):
        try:
            self.cliente.excluir_produto(produto_id)
        except ErroApi:
            logger.exception('Falha ao excluir produto %s', produto_id)
            return False
        self.store.despachar(est.PRODUTO_REMOVIDO, id=produto_id)
        return True

    def alternar_prioritario(self, produto_id, atual):
        """Grava `not atual` já e confirma em segundo plano; devolve o Future"""
        atual = bool(atual)
        transacao = TransacaoOtimista(
            self.store, produto_id, 'prioritario', atual, not atual,
            mensagem_falha=MENSAGEM_FALHA_PRIORIDADE,
        )
        return transacao.executar(
            self.executor,
            lambda: self.cliente.atualizar_produto(produto_id, {'prioritario': not atual}),
        )

    # --- Movimentações ---

    def registrar_movimentacao(self, produto_id, tipo, quantidade, motivo=None):
        if tipo not in TIPOS:
            raise ErroValidacao(f'Tipo de movimentação inválido: {tipo}')
        if quantidade is None or quantidade <= 0:
            raise ErroValidacao(MENSAGEM_QUANTIDADE_INVALIDA)
        dados = {'produtoId': produto_id, 'tipo': tipo, 'quantidade': quantidade}
        motivo = (motivo or '').strip()
        if motivo:
            dados['motivo'] = motivo
        try:
            movimentacao, produto = self.cliente.criar_movimentacao(dados)
        except ErroApi:
            logger.exception('Falha ao criar movimentação para o produto %s', produto_id)
            return None
        self.store.despachar(est.MOVIMENTACAO_CRIADA, movimentacao=movimentacao, produto=produto)
        return movimentacao

    def _verificar_editavel(self, movimentacao_id, acao):
        mov = self.movimentacao(movimentacao_id)
        if mov is not None and mov.tipo == AJUSTE:
            raise OperacaoNaoPermitida(f'Não é possível {acao} movimentações de ajuste')

    def editar_movimentacao(self, movimentacao_id, quantidade, motivo=None):
        self._verificar_editavel(movimentacao_id, 'editar')
        if quantidade is None or quantidade <= 0:
            raise ErroValidacao(MENSAGEM_QUANTIDADE_INVALIDA)
        patch = {'quantidade': quantidade}
        motivo = (motivo or '').strip()
        if motivo:
            patch['motivo'] = motivo
        try:
            movimentacao, produto = self.cliente.atualizar_movimentacao(movimentacao_id, patch)
        except ErroApi:
            logger.exception('Erro ao atualizar movimentação %s', movimentacao_id)
            return None
        self.store.despachar(est.MOVIMENTACAO_SUBSTITUIDA, movimentacao=movimentacao, produto=produto)
        return movimentacao

    def excluir_movimentacao(self, movimentacao_id):
        self._verificar_editavel(movimentacao_id, 'excluir')
        try:
            produto = self.cliente.excluir_movimentacao(movimentacao_id)
        except ErroApi:
            logger.exception('Falha ao excluir movimentação %s', movimentacao_id)
            return False
        self.store.despachar(est.MOVIMENTACAO_REMOVIDA, id=movimentacao_id, produto=produto)
        return True
