# Paginação da tabela de produtos e do histórico (páginas começam em 1)
import math

PAGINAS_VIZINHAS = 3  # Números exibidos ao redor da página atual
RETICENCIAS = '...'


def total_paginas(total_itens, itens_por_pagina):
    if itens_por_pagina <= 0:
        raise ValueError('itens_por_pagina deve ser positivo')
    return math.ceil(total_itens / itens_por_pagina)


def fatiar(itens, pagina, itens_por_pagina):
    inicio = (pagina - 1) * itens_por_pagina
    return list(itens[inicio:inicio + itens_por_pagina])


def pagina_valida(destino, pagina_atual, paginas):
    """True se a troca de página deve acontecer"""
    return 1 <= destino <= paginas and destino != pagina_atual


def numeros_paginas(pagina_atual, paginas):
    """Números exibidos no paginador, com '...' nos intervalos omitidos"""
    if paginas <= PAGINAS_VIZINHAS + 4:
        return list(range(1, paginas + 1))

    inicio = max(2, pagina_atual - 1)
    fim = min(paginas - 1, pagina_atual + 1)
    if pagina_atual <= 3:
        inicio, fim = 2, 3
    if pagina_atual >= paginas - 2:
        inicio, fim = paginas - 2, paginas - 1

    numeros = [1]
    if inicio > 2:
        numeros.append(RETICENCIAS)
    numeros.extend(range(inicio, fim + 1))
    if fim < paginas - 1:
        numeros.append(RETICENCIAS)
    numeros.append(paginas)
    return numeros


def faixa_exibida(pagina_atual, itens_por_pagina, total_itens):
    """(primeiro, último) item exibido, para o texto 'Exibindo a - b de n'"""
    if total_itens == 0:
        return 0, 0
    primeiro = min((pagina_atual - 1) * itens_por_pagina + 1, total_itens)
    ultimo = min(pagina_atual * itens_por_pagina, total_itens)
    return primeiro, ultimo


class Pagina:
    """Recorte de uma lista já filtrada, com os dados que o paginador precisa"""

    def __init__(self, itens, pagina, itens_por_pagina):
        self.total = len(itens)
        self.por_pagina = itens_por_pagina
        self.paginas = total_paginas(self.total, itens_por_pagina)
        # Página fora da faixa volta para a primeira
        self.atual = pagina if 1 <= pagina <= max(self.paginas, 1) else 1
        self.itens = fatiar(itens, self.atual, itens_por_pagina)
        self.numeros = numeros_paginas(self.atual, self.paginas)
        self.primeiro, self.ultimo = faixa_exibida(self.atual, itens_por_pagina, self.total)

    @property
    def tem_anterior(self):
        return self.atual > 1

    @property
    def tem_proxima(self):
        return self.atual < self.paginas

    @property
    def visivel(self):
        return self.paginas > 1
