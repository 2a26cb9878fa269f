"""Filtros da lista de produtos e do histórico de movimentações.

Funções puras: recebem a lista em memória e devolvem a subsequência que
atende a todos os critérios, preservando a ordem original.
"""
from collections import namedtuple

# Critérios da tela de estoque
CriteriosEstoque = namedtuple(
    'CriteriosEstoque',
    ['busca', 'categoria', 'abaixo_minimo', 'prioritarios'],
)
CriteriosEstoque.__new__.__defaults__ = ('', '', False, False)


def corresponde_busca(produto, busca):
    termo = (busca or '').strip().lower()
    if termo == '':
        return True
    return (
        termo in (produto.nome or '').lower()
        or termo in (produto.sku or '').lower()
        or termo in (produto.categoria or '').lower()
    )


def corresponde(produto, criterios):
    if not corresponde_busca(produto, criterios.busca):
        return False
    if criterios.categoria and produto.categoria != criterios.categoria:
        return False
    if criterios.abaixo_minimo and not produto.abaixo_minimo:
        return False
    if criterios.prioritarios and not produto.prioritario:
        return False
    return True


def filtrar_produtos(produtos, criterios):
    return [p for p in produtos if corresponde(p, criterios)]


def valores_distintos(valores):
    """Valores não vazios na ordem da primeira ocorrência"""
    vistos = []
    for valor in valores:
        if valor and valor not in vistos:
            vistos.append(valor)
    return vistos


def categorias(produtos):
    return valores_distintos(p.categoria for p in produtos)


def locais_armazenamento(produtos):
    return valores_distintos(p.local_armazenamento for p in produtos)


def filtrar_movimentacoes(movimentacoes, produtos_por_id, data_inicio=None, data_fim=None, categoria=''):
    """Filtra o histórico por período (datas inclusivas) e pela categoria do produto"""
    resultado = []
    for mov in movimentacoes:
        data_mov = mov.criado_em_data
        if data_inicio or data_fim:
            if data_mov is None:
                continue
            if data_inicio and data_mov.date() < data_inicio:
                continue
            if data_fim and data_mov.date() > data_fim:
                continue
        if categoria:
            produto = produtos_por_id.get(mov.produto_id)
            if produto is None or produto.categoria != categoria:
                continue
        resultado.append(mov)
    return resultado


def itens_para_repor(produtos, categoria=''):
    """Produtos com estoque estritamente abaixo do mínimo, com a quantidade a repor"""
    if categoria:
        produtos = [p for p in produtos if p.categoria == categoria]
    return [
        (p, p.estoque_minimo - p.quantidade)
        for p in produtos
        if p.estoque_minimo is not None and p.quantidade < p.estoque_minimo
    ]
