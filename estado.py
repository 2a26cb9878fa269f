"""Estado da interface e suas transições.

EstadoPainel é imutável; toda mudança passa por reduzir(estado, acao), que
devolve um novo estado. O Store guarda o estado atual e serializa as ações
vindas das requisições web e das threads de segundo plano.
"""
import threading
from collections import namedtuple
from dataclasses import dataclass, replace

MENSAGEM_ERRO_CARGA = 'Não foi possível conectar ao servidor. Verifique o backend.'

Acao = namedtuple('Acao', ['tipo', 'dados'])

# Tipos de ação
INICIAR_CARGA = 'INICIAR_CARGA'
CARGA_CANCELADA = 'CARGA_CANCELADA'
PRIMEIRA_PAGINA = 'PRIMEIRA_PAGINA'
DADOS_COMPLETOS = 'DADOS_COMPLETOS'
FALHA_CARGA = 'FALHA_CARGA'
PRODUTO_CRIADO = 'PRODUTO_CRIADO'
PRODUTO_SUBSTITUIDO = 'PRODUTO_SUBSTITUIDO'
PRODUTO_REMOVIDO = 'PRODUTO_REMOVIDO'
CAMPO_PRODUTO_ALTERADO = 'CAMPO_PRODUTO_ALTERADO'
MOVIMENTACAO_CRIADA = 'MOVIMENTACAO_CRIADA'
MOVIMENTACAO_SUBSTITUIDA = 'MOVIMENTACAO_SUBSTITUIDA'
MOVIMENTACAO_REMOVIDA = 'MOVIMENTACAO_REMOVIDA'
BUSCA_DIGITADA = 'BUSCA_DIGITADA'
BUSCA_APLICADA = 'BUSCA_APLICADA'
CATEGORIA_FILTRADA = 'CATEGORIA_FILTRADA'
ABAIXO_MINIMO_FILTRADO = 'ABAIXO_MINIMO_FILTRADO'
PRIORITARIOS_FILTRADO = 'PRIORITARIOS_FILTRADO'
PAGINA_ALTERADA = 'PAGINA_ALTERADA'
TOTAL_FILTRADO = 'TOTAL_FILTRADO'
AVISO_EMITIDO = 'AVISO_EMITIDO'
AVISOS_CONSUMIDOS = 'AVISOS_CONSUMIDOS'


@dataclass(frozen=True)
class EstadoPainel:
    primeira_pagina: tuple = ()  # Página rápida exibida enquanto o resto carrega
    produtos: tuple = ()  # Conjunto completo de produtos
    movimentacoes: tuple = ()  # Todas as movimentações, mais recentes primeiro
    carregando: bool = True  # Aguardando a primeira página
    carregando_tudo: bool = True  # Aguardando produtos completos e movimentações
    erro: str = None  # Falha de carga: substitui todas as telas
    geracao: int = 0  # Carga em vigor; respostas de gerações antigas são descartadas
    busca: str = ''  # Texto digitado
    busca_aplicada: str = ''  # Texto após o debounce
    categoria: str = ''
    abaixo_minimo: bool = False
    prioritarios: bool = False
    pagina: int = 1
    total_filtrado: int = 0  # Último total visto, para voltar à página 1 quando mudar
    avisos: tuple = ()  # Mensagens pendentes para o usuário

    @property
    def base_produtos(self):
        """Lista sobre a qual os filtros operam"""
        return self.primeira_pagina if self.carregando_tudo else self.produtos


# --- Auxiliares ---

def _substituir(itens, novo):
    return tuple(novo if item.id == novo.id else item for item in itens)


def _sem(itens, item_id):
    return tuple(item for item in itens if item.id != item_id)


def _carga_obsoleta(estado, dados):
    return dados['geracao'] != estado.geracao


# --- Carga ---

def _iniciar_carga(estado, dados):
    return replace(estado, geracao=dados['geracao'], carregando=True, carregando_tudo=True, erro=None)


def _carga_cancelada(estado, dados):
    return replace(estado, geracao=dados['geracao'])


def _primeira_pagina(estado, dados):
    if _carga_obsoleta(estado, dados):
        return estado
    if not estado.carregando_tudo:
        # Os dados completos chegaram antes e prevalecem
        return replace(estado, carregando=False)
    return replace(estado, primeira_pagina=tuple(dados['produtos']), carregando=False)


def _dados_completos(estado, dados):
    if _carga_obsoleta(estado, dados):
        return estado
    return replace(
        estado,
        produtos=tuple(dados['produtos']),
        movimentacoes=tuple(dados['movimentacoes']),
        carregando=False,
        carregando_tudo=False,
    )


def _falha_carga(estado, dados):
    if _carga_obsoleta(estado, dados):
        return estado
    return replace(
        estado,
        erro=dados.get('mensagem') or MENSAGEM_ERRO_CARGA,
        carregando=False,
        carregando_tudo=False,
    )


# --- Produtos ---

def _produto_criado(estado, dados):
    produto = dados['produto']
    novo = replace(estado, produtos=(produto,) + estado.produtos)
    if estado.carregando_tudo:
        novo = replace(novo, primeira_pagina=(produto,) + estado.primeira_pagina)
    return novo


def _produto_substituido(estado, dados):
    produto = dados['produto']
    return replace(
        estado,
        produtos=_substituir(estado.produtos, produto),
        primeira_pagina=_substituir(estado.primeira_pagina, produto),
    )


def _produto_removido(estado, dados):
    produto_id = dados['id']
    return replace(
        estado,
        produtos=_sem(estado.produtos, produto_id),
        primeira_pagina=_sem(estado.primeira_pagina, produto_id),
        movimentacoes=tuple(m for m in estado.movimentacoes if m.produto_id != produto_id),
    )


def _campo_produto_alterado(estado, dados):
    produto_id, campo, valor = dados['id'], dados['campo'], dados['valor']

    def alterar(itens):
        return tuple(p.com(**{campo: valor}) if p.id == produto_id else p for p in itens)

    return replace(estado, produtos=alterar(estado.produtos), primeira_pagina=alterar(estado.primeira_pagina))


# --- Movimentações ---

def _movimentacao_criada(estado, dados):
    estado = replace(estado, movimentacoes=(dados['movimentacao'],) + estado.movimentacoes)
    return _produto_substituido(estado, dados)


def _movimentacao_substituida(estado, dados):
    estado = replace(estado, movimentacoes=_substituir(estado.movimentacoes, dados['movimentacao']))
    return _produto_substituido(estado, dados)


def _movimentacao_removida(estado, dados):
    estado = replace(estado, movimentacoes=_sem(estado.movimentacoes, dados['id']))
    return _produto_substituido(estado, dados)


# --- Filtros e paginação ---

def _busca_digitada(estado, dados):
    return replace(estado, busca=dados['texto'])


def _busca_aplicada(estado, dados):
    return replace(estado, busca_aplicada=dados['texto'], pagina=1)


def _categoria_filtrada(estado, dados):
    return replace(estado, categoria=dados['categoria'] or '', pagina=1)


def _abaixo_minimo_filtrado(estado, dados):
    return replace(estado, abaixo_minimo=bool(dados['ativo']), pagina=1)


def _prioritarios_filtrado(estado, dados):
    return replace(estado, prioritarios=bool(dados['ativo']), pagina=1)


def _pagina_alterada(estado, dados):
    return replace(estado, pagina=dados['pagina'])


def _total_filtrado(estado, dados):
    if dados['total'] == estado.total_filtrado:
        return estado
    return replace(estado, total_filtrado=dados['total'], pagina=1)


# --- Avisos ---

def _aviso_emitido(estado, dados):
    return replace(estado, avisos=estado.avisos + (dados['mensagem'],))


def _avisos_consumidos(estado, dados):
    return replace(estado, avisos=())


_REDUTORES = {
    INICIAR_CARGA: _iniciar_carga,
    CARGA_CANCELADA: _carga_cancelada,
    PRIMEIRA_PAGINA: _primeira_pagina,
    DADOS_COMPLETOS: _dados_completos,
    FALHA_CARGA: _falha_carga,
    PRODUTO_CRIADO: _produto_criado,
    PRODUTO_SUBSTITUIDO: _produto_substituido,
    PRODUTO_REMOVIDO: _produto_removido,
    CAMPO_PRODUTO_ALTERADO: _campo_produto_alterado,
    MOVIMENTACAO_CRIADA: _movimentacao_criada,
    MOVIMENTACAO_SUBSTITUIDA: _movimentacao_substituida,
    MOVIMENTACAO_REMOVIDA: _movimentacao_removida,
    BUSCA_DIGITADA: _busca_digitada,
    BUSCA_APLICADA: _busca_aplicada,
    CATEGORIA_FILTRADA: _categoria_filtrada,
    ABAIXO_MINIMO_FILTRADO: _abaixo_minimo_filtrado,
    PRIORITARIOS_FILTRADO: _prioritarios_filtrado,
    PAGINA_ALTERADA: _pagina_alterada,
    TOTAL_FILTRADO: _total_filtrado,
    AVISO_EMITIDO: _aviso_emitido,
    AVISOS_CONSUMIDOS: _avisos_consumidos,
}


def reduzir(estado, acao):
    """Aplica uma ação e devolve o novo estado"""
    try:
        redutor = _REDUTORES[acao.tipo]
    except KeyError:
        raise ValueError(f'Ação desconhecida: {acao.tipo}')
    return redutor(estado, acao.dados)


def acao(tipo, **dados):
    return Acao(tipo, dados)


class Store:
    """Guarda o EstadoPainel atual; ações são aplicadas uma de cada vez"""

    def __init__(self, estado=None):
        self._estado = estado or EstadoPainel()
        self._lock = threading.Lock()

    @property
    def estado(self):
        return self._estado

    def despachar(self, tipo, **dados):
        with self._lock:
            self._estado = reduzir(self._estado, Acao(tipo, dados))
            return self._estado

    def consumir_avisos(self):
        with self._lock:
            avisos = self._estado.avisos
            self._estado = reduzir(self._estado, Acao(AVISOS_CONSUMIDOS, {}))
        return list(avisos)
