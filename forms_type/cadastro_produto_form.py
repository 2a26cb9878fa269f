# Formulário para cadastro e edição de produtos
from flask_wtf import FlaskForm
from wtforms import StringField, DecimalField, IntegerField, SubmitField, TextAreaField
from wtforms.validators import DataRequired, NumberRange, Optional, Length

from models import dados_para_api


def _texto(valor):
    # Campos opcionais vazios não são enviados ao serviço
    return (valor or '').strip() or None


class CadastroProdutoForm(FlaskForm):
    nome = StringField('Nome *', validators=[DataRequired(), Length(max=150)], render_kw={"placeholder": "Ex: Parafuso Sextavado"})  # Nome do produto
    descricao = TextAreaField('Descrição', render_kw={"placeholder": "Detalhes do produto (opcional)"})  # Descrição detalhada
    categoria = StringField('Categoria', render_kw={"placeholder": "Ex: Ferragens", "list": "cats"})  # Categoria (com sugestões)
    local_armazenamento = StringField('Local de Armazenamento', render_kw={"placeholder": "Ex: Pátio 04", "list": "locais"})  # Local físico
    unidade = StringField('Unidade de Medida', default='un', validators=[DataRequired()], render_kw={"placeholder": "un, kg, m, L"})  # Unidade
    quantidade = IntegerField('Quantidade Inicial', default=0, validators=[Optional(), NumberRange(min=0)])  # Só no cadastro
    estoque_minimo = IntegerField('Estoque Mínimo', validators=[Optional(), NumberRange(min=0)])  # Limite de reposição
    valor_unitario = DecimalField('Valor Unitário (R$)', places=2, validators=[Optional(), NumberRange(min=0)], render_kw={"placeholder": "Opcional", "step": "0.01"})  # Valor unitário
    fornecedor = StringField('Fornecedor', render_kw={"placeholder": "Nome do fornecedor (opcional)"})  # Fornecedor
    submit = SubmitField('Salvar')  # Botão de envio

    def dados_produto(self, incluir_quantidade=True):
        """Payload JSON para o serviço; a quantidade só vai no cadastro"""
        dados = dados_para_api(
            nome=self.nome.data.strip(),
            categoria=_texto(self.categoria.data),
            unidade=self.unidade.data.strip(),
            estoque_minimo=self.estoque_minimo.data,
            local_armazenamento=_texto(self.local_armazenamento.data),
            fornecedor=_texto(self.fornecedor.data),
            valor_unitario=float(self.valor_unitario.data) if self.valor_unitario.data is not None else None,
        )
        dados['descricao'] = (self.descricao.data or '').strip()
        if incluir_quantidade:
            dados['quantidade'] = self.quantidade.data or 0
        return dados

    def preencher(self, produto):
        """Carrega os valores atuais de um produto no formulário de edição"""
        self.nome.data = produto.nome
        self.descricao.data = produto.descricao or ''
        self.categoria.data = produto.categoria or ''
        self.local_armazenamento.data = produto.local_armazenamento or ''
        self.unidade.data = produto.unidade
        self.quantidade.data = produto.quantidade
        self.estoque_minimo.data = produto.estoque_minimo
        self.valor_unitario.data = produto.valor_unitario
        self.fornecedor.data = produto.fornecedor or ''
