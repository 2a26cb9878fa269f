import unittest

import requests

from cliente_api import ClienteEstoque
from excecoes import ErroApi
from tests.apoio import RespostaFalsa, SessaoFalsa


PRODUTO_JSON = {
    'id': 7,
    'sku': 'PAR-001',
    'nome': 'Parafuso',
    'quantidade': '12',
    'unidade': 'un',
    'estoqueMinimo': 5,
    'localArmazenamento': 'Pátio 04',
    'prioritario': True,
    'valorUnitario': 0.5,
    'criadoEm': '2024-05-01T10:00:00Z',
}


class ClienteEstoqueTest(unittest.TestCase):

    def cliente(self, *respostas, erro=None):
        self.sessao = SessaoFalsa(*respostas, erro=erro)
        return ClienteEstoque('http://estoque.test/api/', timeout=3, session=self.sessao)

    def test_listar_produtos_envia_pagina_e_limite(self):
        cliente = self.cliente(RespostaFalsa(corpo=[PRODUTO_JSON]))

        produtos = cliente.listar_produtos(1, 30)

        requisicao = self.sessao.requisicoes[0]
        self.assertEqual(requisicao['metodo'], 'GET')
        self.assertEqual(requisicao['url'], 'http://estoque.test/api/produtos')
        self.assertEqual(requisicao['params'], {'_page': 1, '_limit': 30})
        self.assertEqual(requisicao['timeout'], 3)
        self.assertEqual(len(produtos), 1)
        produto = produtos[0]
        self.assertEqual(produto.id, '7')
        self.assertEqual(produto.quantidade, 12)
        self.assertEqual(produto.estoque_minimo, 5)
        self.assertEqual(produto.local_armazenamento, 'Pátio 04')
        self.assertTrue(produto.prioritario)

    def test_listar_todos_produtos_usa_limite_alto(self):
        cliente = self.cliente(RespostaFalsa(corpo=[]))
        self.assertEqual(cliente.listar_todos_produtos(), [])
        self.assertEqual(self.sessao.requisicoes[0]['params'], {'_limit': 10000})

    def test_status_de_erro_vira_erro_api(self):
        cliente = self.cliente(RespostaFalsa(status_code=500, corpo={}))
        with self.assertRaises(ErroApi) as ctx:
            cliente.listar_movimentacoes()
        self.assertEqual(ctx.exception.status, 500)
        self.assertEqual(ctx.exception.url, 'http://estoque.test/api/movimentacoes')

    def test_falha_de_conexao_vira_erro_api(self):
        cliente = self.cliente(erro=requests.exceptions.ConnectionError('recusada'))
        with self.assertRaises(ErroApi) as ctx:
            cliente.listar_produtos(1, 30)
        self.assertIsNone(ctx.exception.status)

    def test_json_invalido_vira_erro_api(self):
        cliente = self.cliente(RespostaFalsa(json_invalido=True))
        with self.assertRaises(ErroApi):
            cliente.listar_movimentacoes()

    def test_listagem_que_nao_e_array_vira_erro_api(self):
        cliente = self.cliente(RespostaFalsa(corpo={'dados': []}))
        with self.assertRaises(ErroApi):
            cliente.listar_todos_produtos()

    def test_item_nulo_na_listagem_vira_erro_api(self):
        cliente = self.cliente(RespostaFalsa(corpo=[PRODUTO_JSON, None]))
        with self.assertRaises(ErroApi):
            cliente.listar_todos_produtos()

    def test_campo_com_tipo_errado_vira_erro_api(self):
        cliente = self.cliente(RespostaFalsa(corpo=dict(PRODUTO_JSON, quantidade='abc')))
        with self.assertRaises(ErroApi):
            cliente.atualizar_produto('7', {'nome': 'Parafuso'})

    def test_atualizar_produto_usa_patch(self):
        cliente = self.cliente(RespostaFalsa(corpo=dict(PRODUTO_JSON, prioritario=False)))

        produto = cliente.atualizar_produto('7', {'prioritario': False})

        requisicao = self.sessao.requisicoes[0]
        self.assertEqual(requisicao['metodo'], 'PATCH')
        self.assertEqual(requisicao['url'], 'http://estoque.test/api/produtos/7')
        self.assertEqual(requisicao['json'], {'prioritario': False})
        self.assertFalse(produto.prioritario)

    def test_excluir_produto_ignora_corpo(self):
        cliente = self.cliente(RespostaFalsa(status_code=204, json_invalido=True))
        self.assertIsNone(cliente.excluir_produto('7'))
        self.assertEqual(self.sessao.requisicoes[0]['metodo'], 'DELETE')

    def test_criar_movimentacao_devolve_movimentacao_e_produto(self):
        corpo = {
            'movimentacao': {'id': 1, 'produtoId': 7, 'tipo': 'entrada', 'quantidade': 3, 'criadoEm': '2024-05-02T09:00:00Z'},
            'produto': dict(PRODUTO_JSON, quantidade=15),
        }
        cliente = self.cliente(RespostaFalsa(status_code=201, corpo=corpo))

        mov, produto = cliente.criar_movimentacao({'produtoId': '7', 'tipo': 'entrada', 'quantidade': 3})

        self.assertEqual(self.sessao.requisicoes[0]['metodo'], 'POST')
        self.assertEqual(mov.produto_id, '7')
        self.assertEqual(mov.quantidade, 3)
        self.assertEqual(produto.quantidade, 15)

    def test_resposta_de_movimentacao_sem_produto_vira_erro_api(self):
        cliente = self.cliente(RespostaFalsa(corpo={'movimentacao': {'id': 1}}))
        with self.assertRaises(ErroApi):
            cliente.criar_movimentacao({'produtoId': '7', 'tipo': 'entrada', 'quantidade': 3})

    def test_atualizar_e_excluir_movimentacao_leem_chaves_do_servidor(self):
        atualizada = {
            'movimentacaoAtualizada': {'id': 1, 'produtoId': 7, 'tipo': 'saida', 'quantidade': 2},
            'produtoAtualizado': dict(PRODUTO_JSON, quantidade=10),
        }
        excluida = {'produtoAtualizado': dict(PRODUTO_JSON, quantidade=12)}
        cliente = self.cliente(RespostaFalsa(corpo=atualizada), RespostaFalsa(corpo=excluida))

        mov, produto = cliente.atualizar_movimentacao('1', {'quantidade': 2})
        self.assertEqual(mov.quantidade, 2)
        self.assertEqual(produto.quantidade, 10)

        produto = cliente.excluir_movimentacao('1')
        self.assertEqual(produto.quantidade, 12)
        self.assertEqual([r['metodo'] for r in self.sessao.requisicoes], ['PATCH', 'DELETE'])


if __name__ == '__main__':
    unittest.main()
