# Modelo Produto: representa um item do estoque mantido pelo serviço externo
from dataclasses import dataclass, replace

# Mapeamento atributo Python -> chave JSON do serviço
CAMPOS_JSON = {
    'id': 'id',
    'sku': 'sku',
    'nome': 'nome',
    'descricao': 'descricao',
    'categoria': 'categoria',
    'unidade': 'unidade',
    'quantidade': 'quantidade',
    'estoque_minimo': 'estoqueMinimo',
    'local_armazenamento': 'localArmazenamento',
    'fornecedor': 'fornecedor',
    'criado_em': 'criadoEm',
    'atualizado_em': 'atualizadoEm',
    'prioritario': 'prioritario',
    'valor_unitario': 'valorUnitario',
}

# Campos que o cliente nunca envia: atribuídos pelo servidor
CAMPOS_SERVIDOR = ('id', 'sku', 'criado_em', 'atualizado_em')


@dataclass(frozen=True)
class Produto:
    id: str  # Identificador opaco atribuído pelo servidor
    sku: str  # Código SKU, imutável após a criação
    nome: str  # Nome do produto
    quantidade: int = 0  # Quantidade em estoque (autoritativa no servidor)
    unidade: str = 'un'  # Unidade de medida
    descricao: str = None  # Descrição detalhada
    categoria: str = None  # Categoria usada nos filtros
    estoque_minimo: int = None  # Limite para alerta de reposição
    local_armazenamento: str = None  # Local físico do item
    fornecedor: str = None  # Fornecedor principal
    criado_em: str = None  # Data/hora de criação (ISO 8601)
    atualizado_em: str = None  # Data/hora da última alteração (ISO 8601)
    prioritario: bool = False  # Marcação de item prioritário
    valor_unitario: float = None  # Valor unitário em R$

    @classmethod
    def from_dict(cls, dados):
        """Constrói um Produto a partir do JSON devolvido pela API"""
        valores = {}
        for atributo, chave in CAMPOS_JSON.items():
            if chave in dados and dados[chave] is not None:
                valores[atributo] = dados[chave]
        valores.setdefault('sku', '')
        valores.setdefault('nome', '')
        valores['id'] = str(valores.get('id', ''))
        valores['quantidade'] = int(valores.get('quantidade', 0))
        valores['prioritario'] = bool(valores.get('prioritario', False))
        return cls(**valores)

    def com(self, **alteracoes):
        """Cópia do produto com os campos alterados"""
        return replace(self, **alteracoes)

    @property
    def abaixo_minimo(self):
        return self.estoque_minimo is not None and self.quantidade <= self.estoque_minimo

    @property
    def valor_total(self):
        # Só faz sentido quando valor e quantidade são diferentes de zero
        if self.valor_unitario and self.quantidade:
            return self.valor_unitario * self.quantidade
        return None

    def __repr__(self):
        return f'<Produto {self.nome}>'  # Representação legível para debug


def dados_para_api(**campos):
    """Converte atributos Python em payload JSON, omitindo valores ausentes e campos do servidor"""
    return {
        CAMPOS_JSON[atributo]: valor
        for atributo, valor in campos.items()
        if valor is not None and atributo not in CAMPOS_SERVIDOR
    }
