# Relatório de reposição: PDF com os produtos abaixo do estoque mínimo
import logging
import os
import time
from datetime import datetime

import pdfkit
from flask import render_template

from excecoes import ErroRelatorio
from filtros import itens_para_repor

logger = logging.getLogger(__name__)

OPCOES_PDF = {
    'encoding': 'UTF-8',
    'page-size': 'A4',
    'margin-top': '10mm',
    'margin-bottom': '10mm',
    'margin-left': '10mm',
    'margin-right': '10mm',
    'no-outline': None,
    'print-media-type': None,
}


def titulo_relatorio(categoria=''):
    return f'Relatório de Reposição: {categoria}' if categoria else 'Relatório de Reposição'


def mensagem_sem_itens(categoria=''):
    sufixo = f' na categoria "{categoria}"' if categoria else ''
    return f'Nenhum item precisa de reposição{sufixo}.'


def nome_arquivo(categoria='', instante=None):
    instante = time.time() if instante is None else instante
    return f'relatorio-reposicao-{categoria or "geral"}-{int(instante * 1000)}.pdf'


def _configuracao(caminho_wkhtmltopdf):
    if not caminho_wkhtmltopdf:
        return None  # pdfkit procura o wkhtmltopdf no PATH
    if not os.path.exists(caminho_wkhtmltopdf):
        raise ErroRelatorio(f'wkhtmltopdf não encontrado em: {caminho_wkhtmltopdf}')
    return pdfkit.configuration(wkhtmltopdf=caminho_wkhtmltopdf)


def gerar_pdf(itens, categoria='', caminho_wkhtmltopdf=None, agora=None):
    """Renderiza o HTML do relatório e converte em PDF (bytes). Requer contexto de aplicação Flask."""
    agora = agora or datetime.now()
    html = render_template(
        'relatorio_reposicao_pdf.html',
        titulo=titulo_relatorio(categoria),
        gerado_em=agora.strftime('%d/%m/%Y %H:%M:%S'),
        itens=itens,
    )
    configuracao = _configuracao(caminho_wkhtmltopdf)
    try:
        pdf = pdfkit.from_string(html, False, configuration=configuracao, options=OPCOES_PDF)
    except (IOError, OSError) as e:
        raise ErroRelatorio(f'Falha ao gerar o PDF: {e}') from e
    logger.info('Relatório de reposição gerado com %s itens', len(itens))
    return pdf


def montar_relatorio(produtos, categoria='', caminho_wkhtmltopdf=None):
    """Devolve (nome do arquivo, bytes do PDF) ou None quando nenhum item precisa de reposição"""
    itens = itens_para_repor(produtos, categoria)
    if not itens:
        return None
    pdf = gerar_pdf(itens, categoria, caminho_wkhtmltopdf)
    return nome_arquivo(categoria), pdf
