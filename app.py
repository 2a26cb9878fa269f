# app.py - Aplicação principal Flask
# Inicializa Flask, o cliente do serviço de estoque, o Painel e as rotas

import atexit
import logging

from flask import Flask
from flask_wtf.csrf import CSRFProtect

from cliente_api import ClienteEstoque
from config import config
from models import formatar_data_br
from painel import Painel
from rotas import estoque_bp

FORMATO_LOG = '[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s'

csrf = CSRFProtect()


def formatar_moeda(valor):
    """Valor monetário no formato brasileiro (R$ 1.234,56)"""
    if valor is None:
        return '-'
    texto = f'{float(valor):,.2f}'
    return 'R$ ' + texto.replace(',', '_').replace('.', ',').replace('_', '.')


def configurar_log(app):
    logging.basicConfig(level=app.config.get('LOG_LEVEL', 'INFO'), format=FORMATO_LOG)


def create_app(config_class=None, cliente=None, executor=None):
    """Monta a aplicação. Cliente e executor podem ser injetados (testes)."""
    # ===== Inicialização da aplicação Flask =====
    app = Flask(__name__)
    app.config.from_object(config_class or config)
    configurar_log(app)

    # ===== Inicializa extensões Flask =====
    csrf.init_app(app)

    # ===== Serviço de estoque e estado da interface =====
    if cliente is None:
        cliente = ClienteEstoque(app.config['API_BASE_URL'], timeout=app.config['API_TIMEOUT'])
    painel = Painel.from_config(app.config, cliente, executor=executor)
    app.extensions['painel'] = painel

    # ===== Registro de blueprints e filtros de template =====
    app.register_blueprint(estoque_bp)
    app.add_template_filter(formatar_data_br, 'data_br')
    app.add_template_filter(formatar_moeda, 'moeda')

    if app.config['CARREGAR_AO_INICIAR']:
        app.logger.info('Carregando dados de %s', app.config['API_BASE_URL'])
        painel.iniciar()
    if not app.testing:
        atexit.register(painel.encerrar)
    return app


if __name__ == '__main__':
    app = create_app()
    # Sem reloader: o Painel vive no processo e carrega os dados uma única vez
    app.run(debug=app.config.get('DEBUG', False), use_reloader=False)
