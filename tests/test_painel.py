import unittest
from datetime import date

from cliente_api import ClienteEstoque
from estado import EstadoPainel, Store
from excecoes import ErroValidacao, OperacaoNaoPermitida
from models import AJUSTE, ENTRADA, SAIDA
from painel import MENSAGEM_FALHA_PRIORIDADE, Painel
from tests.apoio import (
    ClienteFalso, ExecutorAdiado, ExecutorImediato, FabricaTimers, RespostaFalsa, SessaoFalsa, movimentacao, produto,
)


class PainelTestBase(unittest.TestCase):

    def setUp(self):
        self.cliente = ClienteFalso(
            [
                produto(1, 'Parafuso Sextavado', categoria='Ferragens', quantidade=10, estoque_minimo=5),
                produto(2, 'Porca M8', categoria='Ferragens', quantidade=2, estoque_minimo=5),
                produto(3, 'Cimento', categoria='Básico', quantidade=40, estoque_minimo=10),
            ],
            [
                movimentacao('m2', '1', tipo=SAIDA, quantidade=3, criado_em='2024-05-12T10:00:00'),
                movimentacao('m1', '1', tipo=AJUSTE, quantidade=13, criado_em='2024-05-01T10:00:00'),
            ],
        )
        self.timers = FabricaTimers()
        self.painel = self.criar_painel(ExecutorImediato())
        self.painel.iniciar()

    def criar_painel(self, executor, itens_por_pagina=30):
        return Painel(self.cliente, executor=executor, itens_por_pagina=itens_por_pagina, criar_timer=self.timers)


class ConsultaTest(PainelTestBase):

    def test_carga_inicial_preenche_o_estado(self):
        estado = self.painel.estado
        self.assertFalse(estado.carregando_tudo)
        self.assertEqual(len(estado.produtos), 3)
        self.assertEqual(self.painel.produto('2').nome, 'Porca M8')
        self.assertIsNone(self.painel.produto('99'))
        self.assertEqual(self.painel.movimentacao('m1').tipo, AJUSTE)

    def test_visao_estoque(self):
        visao = self.painel.visao_estoque()
        self.assertEqual(visao.pagina.total, 3)
        self.assertEqual(visao.categorias, ['Ferragens', 'Básico'])
        self.assertEqual([m.id for m in visao.recentes], ['m2', 'm1'])
        self.assertIn('1', visao.produtos_por_id)

    def test_filtros_do_painel(self):
        self.painel.filtrar_categoria('Ferragens')
        self.painel.filtrar_abaixo_minimo(True)
        self.assertEqual([p.id for p in self.painel.produtos_filtrados()], ['2'])

        self.painel.filtrar_abaixo_minimo(False)
        self.painel.filtrar_categoria('')
        self.painel.filtrar_prioritarios(True)
        self.assertEqual(self.painel.produtos_filtrados(), [])

    def test_busca_com_debounce_aplica_somente_o_valor_final(self):
        for parcial in ('p', 'pa', 'par', 'para', 'paraf', 'parafu', 'parafus', 'parafuso'):
            self.painel.digitar_busca(parcial)

        self.assertEqual(self.painel.estado.busca, 'parafuso')
        self.assertEqual(self.painel.estado.busca_aplicada, '')
        self.assertEqual(len(self.painel.produtos_filtrados()), 3)

        self.timers.disparar_todos()

        self.assertEqual(self.painel.estado.busca_aplicada, 'parafuso')
        self.assertEqual([p.id for p in self.painel.produtos_filtrados()], ['1'])

    def test_tecla_atrasada_nao_sobrescreve_a_mais_nova(self):
        self.assertTrue(self.painel.digitar_busca('parafuso', 8))
        # Requisições das teclas anteriores chegando depois
        self.assertFalse(self.painel.digitar_busca('parafus', 7))
        self.assertFalse(self.painel.digitar_busca('para', 5))

        self.assertEqual(self.painel.estado.busca, 'parafuso')
        self.timers.disparar_todos()
        self.assertEqual(self.painel.estado.busca_aplicada, 'parafuso')

    def test_troca_de_pagina_valida_e_invalida(self):
        painel = self.criar_painel(ExecutorImediato(), itens_por_pagina=2)
        painel.iniciar()
        painel.visao_estoque()

        self.assertFalse(painel.ir_para_pagina(0))
        self.assertFalse(painel.ir_para_pagina(3))
        self.assertFalse(painel.ir_para_pagina(1))
        self.assertEqual(painel.estado.pagina, 1)

        self.assertTrue(painel.ir_para_pagina(2))
        visao = painel.visao_estoque()
        self.assertEqual(visao.pagina.atual, 2)
        self.assertEqual([p.id for p in visao.pagina.itens], ['3'])

    def test_mudar_filtro_volta_para_a_primeira_pagina(self):
        painel = self.criar_painel(ExecutorImediato(), itens_por_pagina=2)
        painel.iniciar()
        painel.visao_estoque()
        painel.ir_para_pagina(2)

        painel.filtrar_categoria('Ferragens')

        self.assertEqual(painel.visao_estoque().pagina.atual, 1)

    def test_historico_filtrado_e_paginado(self):
        visao = self.painel.visao_movimentacoes(data_inicio=date(2024, 5, 10), por_pagina=13)
        self.assertEqual([m.id for m in visao.pagina.itens], ['m2'])
        self.assertEqual(visao.pagina.por_pagina, 30)


class PrioridadeTest(PainelTestBase):

    def test_alternar_com_sucesso(self):
        futuro = self.painel.alternar_prioritario('1', False)

        self.assertTrue(futuro.result())
        self.assertTrue(self.painel.produto('1').prioritario)
        self.assertEqual(self.cliente.chamadas[-1], ('atualizar_produto', ('1', {'prioritario': True})))
        self.assertEqual(self.painel.consumir_avisos(), [])

    def test_valor_otimista_aparece_antes_da_confirmacao(self):
        executor = ExecutorAdiado()
        painel = self.criar_painel(executor)
        painel.iniciar()
        executor.executar_pendentes()

        painel.alternar_prioritario('1', False)
        self.assertTrue(painel.produto('1').prioritario)
        self.assertNotIn('atualizar_produto', self.cliente.metodos_chamados())

        executor.executar_pendentes()
        self.assertTrue(painel.produto('1').prioritario)

    def test_falha_reverte_e_avisa(self):
        self.cliente.falhar.add('atualizar_produto')

        futuro = self.painel.alternar_prioritario('1', False)

        self.assertFalse(futuro.result())
        self.assertFalse(self.painel.produto('1').prioritario)
        self.assertEqual(self.painel.consumir_avisos(), [MENSAGEM_FALHA_PRIORIDADE])

    def test_resposta_malformada_tambem_reverte(self):
        sessao = SessaoFalsa(RespostaFalsa(corpo={'id': 1, 'nome': 'Produto 1', 'quantidade': 'abc'}))
        store = Store(EstadoPainel(produtos=(produto(1),), carregando=False, carregando_tudo=False))
        painel = Painel(
            ClienteEstoque('http://estoque.test/api', session=sessao),
            executor=ExecutorImediato(),
            criar_timer=self.timers,
            store=store,
        )

        self.assertFalse(painel.alternar_prioritario('1', False).result())

        self.assertFalse(painel.produto('1').prioritario)
        self.assertEqual(painel.consumir_avisos(), [MENSAGEM_FALHA_PRIORIDADE])


class ProdutosTest(PainelTestBase):

    def test_criar_produto_entra_no_inicio(self):
        novo = self.painel.criar_produto({'nome': 'Arruela', 'quantidade': 4, 'unidade': 'un'})
        self.assertEqual(self.painel.estado.produtos[0], novo)
        self.assertEqual(novo.quantidade, 4)

    def test_criar_produto_invalido_nao_chega_ao_servidor(self):
        with self.assertRaises(ErroValidacao):
            self.painel.criar_produto({'nome': '  '})
        with self.assertRaises(ErroValidacao):
            self.painel.criar_produto({'nome': 'Arruela', 'quantidade': -1})
        self.assertNotIn('criar_produto', self.cliente.metodos_chamados())

    def test_atualizar_produto_nao_envia_quantidade_nem_sku(self):
        atualizado = self.painel.atualizar_produto('1', {'nome': 'Parafuso Allen', 'quantidade': 999, 'sku': 'X'})

        self.assertEqual(self.cliente.chamadas[-1], ('atualizar_produto', ('1', {'nome': 'Parafuso Allen'})))
        self.assertEqual(atualizado.quantidade, 10)
        self.assertEqual(self.painel.produto('1').nome, 'Parafuso Allen')

    def test_falha_na_atualizacao_mantem_o_estado(self):
        self.cliente.falhar.add('atualizar_produto')
        antes = self.painel.estado
        self.assertIsNone(self.painel.atualizar_produto('1', {'nome': 'Outro'}))
        self.assertIs(self.painel.estado, antes)

    def test_excluir_produto_remove_suas_movimentacoes(self):
        self.assertTrue(self.painel.excluir_produto('1'))
        self.assertIsNone(self.painel.produto('1'))
        self.assertEqual(self.painel.estado.movimentacoes, ())


class MovimentacoesTest(PainelTestBase):

    def test_quantidade_vem_do_servidor(self):
        # O servidor já tem outro saldo, diferente do cache local
        self.cliente.produtos[0] = self.cliente.produtos[0].com(quantidade=50)

        mov = self.painel.registrar_movimentacao('1', ENTRADA, 5, ' reposição ')

        self.assertEqual(self.painel.produto('1').quantidade, 55)
        self.assertEqual(self.painel.estado.movimentacoes[0], mov)
        self.assertEqual(
            self.cliente.chamadas[-1][1][0],
            {'produtoId': '1', 'tipo': ENTRADA, 'quantidade': 5, 'motivo': 'reposição'},
        )

    def test_quantidade_invalida_nao_chega_ao_servidor(self):
        for quantidade in (0, -3, None):
            with self.assertRaises(ErroValidacao):
                self.painel.registrar_movimentacao('1', SAIDA, quantidade)
        with self.assertRaises(ErroValidacao):
            self.painel.registrar_movimentacao('1', 'transferencia', 1)
        self.assertNotIn('criar_movimentacao', self.cliente.metodos_chamados())

    def test_falha_ao_registrar_mantem_o_estado(self):
        self.cliente.falhar.add('criar_movimentacao')
        antes = self.painel.estado
        self.assertIsNone(self.painel.registrar_movimentacao('1', SAIDA, 1))
        self.assertIs(self.painel.estado, antes)

    def test_editar_movimentacao(self):
        mov = self.painel.editar_movimentacao('m2', 1, 'corrigido')

        self.assertEqual(mov.quantidade, 1)
        self.assertEqual(self.painel.movimentacao('m2').motivo, 'corrigido')
        # Saída de 3 desfeita e refeita como saída de 1
        self.assertEqual(self.painel.produto('1').quantidade, 12)

    def test_excluir_movimentacao_reverte_o_estoque(self):
        self.assertTrue(self.painel.excluir_movimentacao('m2'))
        self.assertIsNone(self.painel.movimentacao('m2'))
        self.assertEqual(self.painel.produto('1').quantidade, 13)

    def test_ajuste_nao_pode_ser_editado_nem_excluido(self):
        with self.assertRaises(OperacaoNaoPermitida):
            self.painel.excluir_movimentacao('m1')
        with self.assertRaises(OperacaoNaoPermitida):
            self.painel.editar_movimentacao('m1', 5)
        chamados = self.cliente.metodos_chamados()
        self.assertNotIn('excluir_movimentacao', chamados)
        self.assertNotIn('atualizar_movimentacao', chamados)
        self.assertIsNotNone(self.painel.movimentacao('m1'))


class EncerramentoTest(PainelTestBase):

    def test_encerrar_libera_o_executor_e_o_debounce(self):
        executor = ExecutorImediato()
        painel = self.criar_painel(executor)
        painel.digitar_busca('abc')

        painel.encerrar()
        self.timers.disparar_todos()

        self.assertTrue(executor.encerrado)
        self.assertEqual(painel.estado.busca_aplicada, '')


if __name__ == '__main__':
    unittest.main()
