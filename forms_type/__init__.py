# Formulários das telas de estoque
from .cadastro_produto_form import CadastroProdutoForm
from .movimentacao_form import MovimentacaoForm, EditarMovimentacaoForm
from .filtro_form import FiltroEstoqueForm, FiltroMovimentacoesForm
