# Exceções do sistema de controle de estoque


class ErroEstoque(Exception):
    """Erro base da aplicação"""


class ErroApi(ErroEstoque):
    """Falha ao falar com o serviço de estoque (rede, status não-2xx ou JSON inválido)"""

    def __init__(self, mensagem, status=None, url=None):
        super().__init__(mensagem)
        self.status = status  # Código HTTP, quando houve resposta
        self.url = url  # URL da requisição que falhou


class ErroValidacao(ErroEstoque):
    """Dados rejeitados antes de qualquer requisição"""


class OperacaoNaoPermitida(ErroEstoque):
    """Ação bloqueada por política da interface (ex.: excluir movimentação de ajuste)"""


class ErroRelatorio(ErroEstoque):
    """Falha na geração do PDF de reposição"""
