# Modelos de domínio do sistema: cópias imutáveis dos dados do serviço de estoque
from .produto import Produto, dados_para_api
from .movimentacao import Movimentacao, ENTRADA, SAIDA, AJUSTE, TIPOS
from .datas import ler_data, formatar_data_br
