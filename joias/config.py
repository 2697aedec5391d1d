# joias/config.py
"""
Configurações globais e valores padrão do sistema de joias.
"""

import os
from dataclasses import dataclass


# Caminho padrão do banco de dados SQLite (pode ser trocado por JOIAS_DB)
DB_PATH = os.environ.get("JOIAS_DB") or os.path.join(os.getcwd(), "joias.db")


@dataclass
class DefaultConfig:
    """Valores padrão para cadastro, divisões e autenticação."""
    margem_lucro: float = 100.0      # % sobre o custo base
    taxa_credito: float = 5.0        # % estimada da maquininha
    total_pecas_compra: int = 1
    # divisão do lucro de um lote
    reinvestimento: float = 50.0
    reserva_emergencia: float = 30.0
    lucro_liquido: float = 20.0
    # divisão do saldo do caixa
    caixa_reinvestimento: float = 50.0
    caixa_loja: float = 30.0
    caixa_salario: float = 20.0
    # autenticação
    senha_padrao: str = "solarie123"
    tamanho_minimo_senha: int = 4


# Instância global dos valores padrão
DEFAULTS = DefaultConfig()
