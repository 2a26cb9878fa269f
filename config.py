# config.py - Configurações centralizadas da aplicação
# Carrega as variáveis de ambiente (.env) e define os perfis de execução

import os
from dotenv import load_dotenv

# Carrega as variáveis do arquivo .env
load_dotenv()


def _env_bool(nome, padrao):
    valor = os.getenv(nome)
    if valor is None:
        return padrao
    return valor.strip().lower() in ('1', 'true', 'sim', 'yes', 'on')


class Config:
    """Classe de configuração padrão"""

    # ===== Chave secreta para sessões Flask e CSRF =====
    SECRET_KEY = os.getenv('SECRET_KEY', 'dev-secret-key-change-in-production')

    # ===== Serviço externo de estoque =====
    API_BASE_URL = os.getenv('API_BASE_URL', 'http://localhost:3000/api')
    API_TIMEOUT = float(os.getenv('API_TIMEOUT', 10))  # Segundos por requisição

    # ===== Carregamento e paginação =====
    ITENS_POR_PAGINA = int(os.getenv('ITENS_POR_PAGINA', 30))
    LIMITE_TODOS_PRODUTOS = int(os.getenv('LIMITE_TODOS_PRODUTOS', 10000))
    CARREGAR_AO_INICIAR = _env_bool('CARREGAR_AO_INICIAR', True)
    MAX_WORKERS = int(os.getenv('MAX_WORKERS', 4))  # Threads de segundo plano

    # ===== Busca =====
    DEBOUNCE_MS = int(os.getenv('DEBOUNCE_MS', 500))

    # ===== Relatório PDF (pdfkit/wkhtmltopdf) =====
    # Vazio: o pdfkit procura o wkhtmltopdf no PATH
    WKHTMLTOPDF_PATH = os.getenv('WKHTMLTOPDF_PATH') or None

    # ===== Log =====
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

    WTF_CSRF_ENABLED = True


# Classe para desenvolvimento (com debug ativado)
class DevelopmentConfig(Config):
    DEBUG = True
    TESTING = False
    LOG_LEVEL = os.getenv('LOG_LEVEL', 'DEBUG')


# Classe para produção
class ProductionConfig(Config):
    DEBUG = False
    TESTING = False


# Classe para testes
class TestingConfig(Config):
    DEBUG = True
    TESTING = True
    WTF_CSRF_ENABLED = False
    API_BASE_URL = 'http://estoque.test/api'
    DEBOUNCE_MS = 0  # Busca aplicada imediatamente


# Define qual configuração usar baseado em variável de ambiente
config_name = os.getenv('FLASK_ENV', 'development')
config = {
    'development': DevelopmentConfig,
    'production': ProductionConfig,
    'testing': TestingConfig
}.get(config_name, DevelopmentConfig)
