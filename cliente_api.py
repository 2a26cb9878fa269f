"""Cliente HTTP do serviço externo de estoque.

Cada método corresponde a um endpoint de /api/produtos ou /api/movimentacoes.
Não há retentativa nem backoff: qualquer falha de rede, status fora da faixa
2xx ou corpo JSON inválido vira ErroApi e termina a requisição.
"""
import logging

import requests

from excecoes import ErroApi
from models import Movimentacao, Produto

logger = logging.getLogger(__name__)


def _lista(dados):
    if not isinstance(dados, list):
        raise ErroApi('Resposta de listagem não é um array')
    return dados


def _montar(construtor, dados):
    try:
        return construtor(dados)
    except (TypeError, ValueError, KeyError, AttributeError) as e:
        raise ErroApi(f'Resposta com formato inesperado: {e}') from e


def _extrair(corpo, chave):
    if not isinstance(corpo, dict) or not isinstance(corpo.get(chave), dict):
        raise ErroApi(f"Resposta sem o campo '{chave}'")
    return corpo[chave]


class ClienteEstoque:

    def __init__(self, base_url, timeout=10, session=None):
        self.base_url = base_url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({'Accept': 'application/json'})

    def _requisitar(self, metodo, caminho, params=None, json=None, esperar_corpo=True):
        url = f'{self.base_url}{caminho}'
        logger.debug('%s %s params=%s', metodo, url, params)
        try:
            resposta = self.session.request(metodo, url, params=params, json=json, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            raise ErroApi(f'Erro de conexão em {metodo} {url}: {e}', url=url) from e

        if not resposta.ok:
            raise ErroApi(
                f'{metodo} {url} respondeu {resposta.status_code}',
                status=resposta.status_code,
                url=url,
            )
        if not esperar_corpo:
            return None
        try:
            return resposta.json()
        except ValueError as e:
            raise ErroApi(f'Resposta inválida de {metodo} {url}', status=resposta.status_code, url=url) from e

    # --- Produtos ---

    def listar_produtos(self, pagina, limite):
        dados = self._requisitar('GET', '/produtos', params={'_page': pagina, '_limit': limite})
        return [_montar(Produto.from_dict, p) for p in _lista(dados)]

    def listar_todos_produtos(self, limite=10000):
        dados = self._requisitar('GET', '/produtos', params={'_limit': limite})
        return [_montar(Produto.from_dict, p) for p in _lista(dados)]

    def criar_produto(self, dados):
        return _montar(Produto.from_dict, self._requisitar('POST', '/produtos', json=dados))

    def atualizar_produto(self, produto_id, patch):
        return _montar(Produto.from_dict, self._requisitar('PATCH', f'/produtos/{produto_id}', json=patch))

    def excluir_produto(self, produto_id):
        # O corpo da resposta é ignorado
        self._requisitar('DELETE', f'/produtos/{produto_id}', esperar_corpo=False)

    # --- Movimentações ---

    def listar_movimentacoes(self):
        dados = self._requisitar('GET', '/movimentacoes')
        return [_montar(Movimentacao.from_dict, m) for m in _lista(dados)]

    def criar_movimentacao(self, dados):
        """Retorna (movimentacao, produto atualizado)"""
        corpo = self._requisitar('POST', '/movimentacoes', json=dados)
        return (
            _montar(Movimentacao.from_dict, _extrair(corpo, 'movimentacao')),
            _montar(Produto.from_dict, _extrair(corpo, 'produto')),
        )

    def atualizar_movimentacao(self, movimentacao_id, patch):
        """Retorna (movimentacao atualizada, produto atualizado)"""
        corpo = self._requisitar('PATCH', f'/movimentacoes/{movimentacao_id}', json=patch)
        return (
            _montar(Movimentacao.from_dict, _extrair(corpo, 'movimentacaoAtualizada')),
            _montar(Produto.from_dict, _extrair(corpo, 'produtoAtualizado')),
        )

    def excluir_movimentacao(self, movimentacao_id):
        """Retorna o produto com o estoque revertido pelo servidor"""
        corpo = self._requisitar('DELETE', f'/movimentacoes/{movimentacao_id}')
        return _montar(Produto.from_dict, _extrair(corpo, 'produtoAtualizado'))
