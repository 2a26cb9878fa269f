# Rotas das telas de estoque e de movimentações
import io
import logging

from flask import (
    Blueprint, abort, current_app, flash, jsonify, redirect, render_template,
    request, send_file, url_for,
)

from excecoes import ErroRelatorio, ErroValidacao, OperacaoNaoPermitida
from filtros import categorias, locais_armazenamento
from forms import (
    BuscaForm, CadastroProdutoForm, ConfirmacaoForm, EditarMovimentacaoForm,
    FiltroEstoqueForm, FiltroMovimentacoesForm, MovimentacaoForm, PrioridadeForm,
)
from relatorio_reposicao import mensagem_sem_itens, montar_relatorio

logger = logging.getLogger(__name__)

estoque_bp = Blueprint('estoque', __name__)

MENSAGEM_ERRO_RELATORIO = 'Ocorreu um erro ao gerar o relatório. Tente novamente.'


def obter_painel():
    return current_app.extensions['painel']


def renderizar(template, **contexto):
    """Renderiza uma tela completa, exibindo os avisos pendentes do Painel"""
    for aviso in obter_painel().consumir_avisos():
        flash(aviso, 'danger')
    return render_template(template, **contexto)


@estoque_bp.before_request
def verificar_carga():
    # Falha na carga inicial substitui todas as telas
    erro = obter_painel().estado.erro
    if erro:
        return render_template('erro.html', mensagem=erro), 503


# ===== ESTOQUE =====

def _contexto_estoque():
    painel = obter_painel()
    visao = painel.visao_estoque()
    estado = visao.estado
    filtro_form = FiltroEstoqueForm(
        formdata=None,
        categoria=estado.categoria,
        abaixo_minimo=estado.abaixo_minimo,
        prioritarios=estado.prioritarios,
    )
    filtro_form.categoria.choices = [('', 'Todas as categorias')] + [(c, c) for c in visao.categorias]
    return {
        'visao': visao,
        'estado': estado,
        'filtro_form': filtro_form,
        'busca_form': BuscaForm(formdata=None, q=estado.busca),
        'prioridade_form': PrioridadeForm(formdata=None),
        'debounce_ms': current_app.config['DEBOUNCE_MS'],
        'link': lambda numero: url_for('estoque.index', pagina=numero),
    }


@estoque_bp.route('/')
@estoque_bp.route('/index')
def index():
    pagina = request.args.get('pagina', type=int)
    if pagina is not None:
        obter_painel().ir_para_pagina(pagina)
        return redirect(url_for('estoque.index'))
    return renderizar('index.html', ativa='estoque', **_contexto_estoque())


@estoque_bp.route('/produtos/tabela')
def tabela_produtos():
    """Fragmento da tabela, recarregado pelo script da busca"""
    return render_template('_tabela_produtos.html', **_contexto_estoque())


def _sequencia(valor):
    try:
        return int(valor)
    except (TypeError, ValueError):
        return None


@estoque_bp.route('/busca', methods=['POST'])
def busca():
    form = BuscaForm()
    if not form.validate_on_submit():
        return jsonify({'erro': 'Requisição inválida'}), 400
    painel = obter_painel()
    painel.digitar_busca(form.q.data or '', _sequencia(form.seq.data))
    if request.accept_mimetypes.accept_json and not request.accept_mimetypes.accept_html:
        estado = painel.estado
        return jsonify({'busca': estado.busca, 'aplicada': estado.busca_aplicada}), 202
    return redirect(url_for('estoque.index'))


@estoque_bp.route('/filtros', methods=['POST'])
def aplicar_filtros():
    form = FiltroEstoqueForm()
    if form.validate_on_submit():
        painel = obter_painel()
        painel.filtrar_categoria(form.categoria.data or '')
        painel.filtrar_abaixo_minimo(form.abaixo_minimo.data)
        painel.filtrar_prioritarios(form.prioritarios.data)
    return redirect(url_for('estoque.index'))


# ===== PRODUTOS =====

def _produto_ou_404(produto_id):
    produto = obter_painel().produto(produto_id)
    if produto is None:
        abort(404)
    return produto


def _render_form_produto(form, produto=None):
    estado = obter_painel().estado
    return renderizar(
        'produto_form.html',
        ativa='estoque',
        form=form,
        produto=produto,
        titulo=f'Editar: {produto.nome}' if produto else 'Novo Produto',
        categorias=categorias(estado.produtos),
        locais=locais_armazenamento(estado.produtos),
    )


@estoque_bp.route('/produtos/novo', methods=['GET', 'POST'])
def adicionar_produto():
    form = CadastroProdutoForm()
    if form.validate_on_submit():
        try:
            produto = obter_painel().criar_produto(form.dados_produto())
        except ErroValidacao as e:
            flash(str(e), 'danger')
            return _render_form_produto(form)
        if produto is not None:
            flash('Produto cadastrado com sucesso!', 'success')
        return redirect(url_for('estoque.index'))
    return _render_form_produto(form)


@estoque_bp.route('/produtos/<produto_id>/editar', methods=['GET', 'POST'])
def editar_produto(produto_id):
    produto = _produto_ou_404(produto_id)
    form = CadastroProdutoForm()
    if request.method == 'GET':
        form.preencher(produto)
    if form.validate_on_submit():
        atualizado = obter_painel().atualizar_produto(produto_id, form.dados_produto(incluir_quantidade=False))
        if atualizado is not None:
            flash('Produto atualizado com sucesso!', 'success')
        return redirect(url_for('estoque.index'))
    return _render_form_produto(form, produto)


@estoque_bp.route('/produtos/<produto_id>/excluir', methods=['GET', 'POST'])
def excluir_produto(produto_id):
    produto = _produto_ou_404(produto_id)
    form = ConfirmacaoForm()
    if form.validate_on_submit():
        if obter_painel().excluir_produto(produto_id):
            flash('Produto e movimentações associadas removidos com sucesso!', 'success')
        return redirect(url_for('estoque.index'))
    return renderizar('confirmar_exclusao_produto.html', ativa='estoque', produto=produto, form=form)


@estoque_bp.route('/produtos/<produto_id>/prioritario', methods=['POST'])
def alternar_prioritario(produto_id):
    form = PrioridadeForm()
    if form.validate_on_submit():
        obter_painel().alternar_prioritario(produto_id, form.atual.data == '1')
    return redirect(url_for('estoque.index'))


@estoque_bp.route('/produtos/<produto_id>/movimentar', methods=['GET', 'POST'])
def registrar_movimentacao(produto_id):
    produto = _produto_ou_404(produto_id)
    form = MovimentacaoForm()
    if form.validate_on_submit():
        try:
            mov = obter_painel().registrar_movimentacao(produto_id, form.tipo.data, form.quantidade.data, form.motivo.data)
        except ErroValidacao as e:
            flash(str(e), 'danger')
        else:
            if mov is not None:
                flash('Movimentação registrada com sucesso!', 'success')
            return redirect(url_for('estoque.index'))
    return renderizar('movimentacao_form.html', ativa='estoque', produto=produto, form=form)


# ===== MOVIMENTAÇÕES =====

@estoque_bp.route('/movimentacoes')
def listar_movimentacoes():
    painel = obter_painel()
    form = FiltroMovimentacoesForm(formdata=request.args)
    form.categoria.choices = [('', 'Todas')] + [(c, c) for c in painel.visao_estoque().categorias]
    form.validate()
    filtros_ativos = {
        'data_inicio': None if form.data_inicio.errors else form.data_inicio.data,
        'data_fim': None if form.data_fim.errors else form.data_fim.data,
        'categoria': form.categoria.data or '',
        'por_pagina': form.por_pagina.data or 30,
    }
    visao = painel.visao_movimentacoes(pagina=request.args.get('pagina', 1, type=int), **filtros_ativos)
    # Argumentos repetidos nos links do paginador
    args_filtro = {k: v for k, v in request.args.items() if k != 'pagina' and v}
    return renderizar(
        'movimentacoes.html',
        ativa='movimentacoes',
        form=form,
        visao=visao,
        args_filtro=args_filtro,
        link=lambda numero: url_for('estoque.listar_movimentacoes', pagina=numero, **args_filtro),
    )


def _movimentacao_ou_404(movimentacao_id):
    mov = obter_painel().movimentacao(movimentacao_id)
    if mov is None:
        abort(404)
    return mov


@estoque_bp.route('/movimentacoes/<movimentacao_id>/editar', methods=['GET', 'POST'])
def editar_movimentacao(movimentacao_id):
    mov = _movimentacao_ou_404(movimentacao_id)
    painel = obter_painel()
    if not mov.editavel:
        flash('Não é possível editar movimentações de ajuste', 'warning')
        return redirect(url_for('estoque.listar_movimentacoes'))
    form = EditarMovimentacaoForm()
    if request.method == 'GET':
        form.quantidade.data = mov.quantidade
        form.motivo.data = mov.motivo or ''
    if form.validate_on_submit():
        try:
            atualizada = painel.editar_movimentacao(movimentacao_id, form.quantidade.data, form.motivo.data)
        except (ErroValidacao, OperacaoNaoPermitida) as e:
            flash(str(e), 'danger')
        else:
            if atualizada is not None:
                flash('Movimentação atualizada com sucesso!', 'success')
            return redirect(url_for('estoque.listar_movimentacoes'))
    return renderizar(
        'movimentacao_edit.html',
        ativa='movimentacoes',
        movimentacao=mov,
        produto=painel.produto(mov.produto_id),
        form=form,
    )


@estoque_bp.route('/movimentacoes/<movimentacao_id>/excluir', methods=['GET', 'POST'])
def excluir_movimentacao(movimentacao_id):
    mov = _movimentacao_ou_404(movimentacao_id)
    painel = obter_painel()
    form = ConfirmacaoForm()
    if form.validate_on_submit() or not mov.editavel:
        try:
            if painel.excluir_movimentacao(movimentacao_id):
                flash('Movimentação excluída e estoque revertido.', 'success')
        except OperacaoNaoPermitida as e:
            flash(str(e), 'warning')
        return redirect(url_for('estoque.listar_movimentacoes'))
    return renderizar(
        'confirmar_exclusao_movimentacao.html',
        ativa='movimentacoes',
        movimentacao=mov,
        produto=painel.produto(mov.produto_id),
        form=form,
    )


# ===== RELATÓRIOS =====

@estoque_bp.route('/relatorios/reposicao')
def relatorio_reposicao():
    estado = obter_painel().estado
    categoria = estado.categoria
    try:
        resultado = montar_relatorio(estado.produtos, categoria, current_app.config['WKHTMLTOPDF_PATH'])
    except ErroRelatorio:
        logger.exception('Erro ao gerar relatório')
        flash(MENSAGEM_ERRO_RELATORIO, 'danger')
        return redirect(url_for('estoque.index'))
    if resultado is None:
        flash(mensagem_sem_itens(categoria), 'info')
        return redirect(url_for('estoque.index'))

    nome, pdf = resultado
    return send_file(io.BytesIO(pdf), mimetype='application/pdf', as_attachment=True, download_name=nome)
