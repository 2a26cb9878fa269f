"""Modelo Movimentacao: entradas, saídas e ajustes de estoque.

Para 'entrada' e 'saida' a quantidade é um delta; para 'ajuste' é o novo
saldo absoluto do produto. O efeito no estoque é sempre calculado pelo
servidor, que devolve o produto atualizado junto com a movimentação.
"""
from dataclasses import dataclass

from .datas import ler_data

ENTRADA = 'entrada'
SAIDA = 'saida'
AJUSTE = 'ajuste'
TIPOS = (SAIDA, ENTRADA, AJUSTE)

# Rótulos exibidos nos formulários
ROTULOS_TIPO = {
    SAIDA: 'Saída',
    ENTRADA: 'Entrada',
    AJUSTE: 'Ajuste de Estoque',
}

# Cor do badge por tipo (classes do Bootstrap)
CORES_TIPO = {
    ENTRADA: 'success',
    SAIDA: 'danger',
    AJUSTE: 'warning',
}


@dataclass(frozen=True)
class Movimentacao:
    id: str  # Identificador único da movimentação
    produto_id: str  # Produto relacionado
    tipo: str  # 'entrada', 'saida' ou 'ajuste'
    quantidade: int  # Delta (entrada/saída) ou novo saldo (ajuste)
    motivo: str = None  # Motivo informado pelo usuário
    criado_em: str = None  # Data/hora da movimentação (ISO 8601)

    @classmethod
    def from_dict(cls, dados):
        return cls(
            id=str(dados.get('id', '')),
            produto_id=str(dados.get('produtoId', '')),
            tipo=dados.get('tipo', ''),
            quantidade=int(dados.get('quantidade', 0)),
            motivo=dados.get('motivo') or None,
            criado_em=dados.get('criadoEm'),
        )

    @property
    def editavel(self):
        # Ajustes não podem ser editados nem excluídos pela interface
        return self.tipo != AJUSTE

    @property
    def rotulo(self):
        return ROTULOS_TIPO.get(self.tipo, self.tipo)

    @property
    def cor(self):
        return CORES_TIPO.get(self.tipo, 'secondary')

    @property
    def criado_em_data(self):
        return ler_data(self.criado_em)

    def __repr__(self):
        return f'<Movimentacao {self.tipo} {self.quantidade}>'
