# Formulários para registrar e editar movimentações de estoque
from flask_wtf import FlaskForm
from wtforms import SelectField, IntegerField, StringField, SubmitField
from wtforms.validators import DataRequired, InputRequired, NumberRange

from models import TIPOS
from models.movimentacao import ROTULOS_TIPO

MENSAGEM_QUANTIDADE = 'A quantidade deve ser maior que zero.'


class MovimentacaoForm(FlaskForm):
    tipo = SelectField('Tipo', choices=[(t, ROTULOS_TIPO[t]) for t in TIPOS], default='saida', validators=[DataRequired()])  # Tipo de movimentação
    quantidade = IntegerField('Quantidade', default=1, validators=[InputRequired(), NumberRange(min=1, message=MENSAGEM_QUANTIDADE)])  # Delta ou novo saldo (ajuste)
    motivo = StringField('Motivo (opcional)', render_kw={"placeholder": "Ex: Uso na obra, Requisição"})  # Motivo
    submit = SubmitField('Salvar Movimentação')  # Botão de registro


class EditarMovimentacaoForm(FlaskForm):
    quantidade = IntegerField('Quantidade *', validators=[InputRequired(), NumberRange(min=1, message=MENSAGEM_QUANTIDADE)])  # Nova quantidade
    motivo = StringField('Motivo (opcional)')  # Motivo
    submit = SubmitField('Salvar Alterações')  # Botão de envio
