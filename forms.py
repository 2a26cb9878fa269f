# Formulários principais do sistema (busca, confirmações e ações de um clique)
from flask_wtf import FlaskForm
from wtforms import HiddenField, StringField, SubmitField

# Importar formulários específicos para produtos, movimentações e filtros
from forms_type import (
    CadastroProdutoForm,
    MovimentacaoForm,
    EditarMovimentacaoForm,
    FiltroEstoqueForm,
    FiltroMovimentacoesForm,
)


class BuscaForm(FlaskForm):
    """Texto da busca enviado a cada tecla; o debounce acontece no Painel"""
    q = StringField('Pesquisar', render_kw={"placeholder": "Pesquisar por nome, SKU ou categoria", "autocomplete": "off"})
    seq = HiddenField()  # Ordem da tecla no navegador; envios mais antigos são descartados


class PrioridadeForm(FlaskForm):
    """Botão da bandeira de prioridade: envia o estado que o usuário estava vendo"""
    atual = HiddenField()  # '1' se o item estava marcado como prioritário
    submit = SubmitField('Prioridade')


class ConfirmacaoForm(FlaskForm):
    """Confirmação de exclusão (produto ou movimentação)"""
    submit = SubmitField('Confirmar Exclusão')
