# Formulários de filtro das telas de estoque e de movimentações
from flask_wtf import FlaskForm
from wtforms import BooleanField, DateField, SelectField, SubmitField
from wtforms.validators import Optional


class FiltroEstoqueForm(FlaskForm):
    categoria = SelectField('Categoria', choices=[('', 'Todas as categorias')], validate_choice=False)  # Categoria
    abaixo_minimo = BooleanField('Abaixo do mínimo')  # Só itens no limite ou abaixo
    prioritarios = BooleanField('Prioritários')  # Só itens prioritários
    submit = SubmitField('Filtrar')


class FiltroMovimentacoesForm(FlaskForm):
    """Filtros do histórico: enviados por GET, sem CSRF"""

    class Meta:
        csrf = False

    data_inicio = DateField('Data de Início', validators=[Optional()])
    data_fim = DateField('Data de Fim', validators=[Optional()])
    categoria = SelectField('Categoria', choices=[('', 'Todas')], validate_choice=False)
    por_pagina = SelectField('Itens por pág.', choices=[(30, '30'), (70, '70'), (100, '100')], coerce=int, default=30)
