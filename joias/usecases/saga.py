"""
Execução de operações em vários passos (baixa de estoque, reposição).

Cada passo é uma escrita independente no armazenamento. A política da
operação decide o que acontece quando um passo falha:

- HALT_ON_FAILURE: os passos restantes não são executados;
- CONTINUE_ON_FAILURE: a falha é registrada em log e o laço continua.

O resultado de cada passo fica em um `RelatorioOperacao`, devolvido ao
chamador junto com o registro afetado.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional

from joias.domain.erros import PersistenceError
from joias.infra.logger import log_system_event


class PoliticaFalha(str, Enum):
    HALT_ON_FAILURE = "halt"
    CONTINUE_ON_FAILURE = "continue"


OK = "ok"
FALHOU = "falhou"
IGNORADO = "ignorado"
NAO_EXECUTADO = "nao_executado"


@dataclass
class Passo:
    descricao: str
    joia_id: Optional[str] = None
    situacao: str = OK
    erro: Optional[str] = None


@dataclass
class RelatorioOperacao:
    operacao: str
    politica: PoliticaFalha
    passos: List[Passo] = field(default_factory=list)
    interrompida: bool = False

    @property
    def falhas(self) -> List[Passo]:
        return [p for p in self.passos if p.situacao == FALHOU]

    @property
    def ignorados(self) -> List[Passo]:
        return [p for p in self.passos if p.situacao == IGNORADO]

    @property
    def sucesso_total(self) -> bool:
        return not self.falhas and not self.interrompida

    def ignorar(self, descricao: str, joia_id: Optional[str] = None, motivo: Optional[str] = None) -> None:
        self.passos.append(Passo(descricao, joia_id, IGNORADO, motivo))

    def executar(self, descricao: str, acao: Callable[[], None], joia_id: Optional[str] = None) -> bool:
        """Executa um passo respeitando a política. Retorna True se deu certo."""
        if self.interrompida:
            self.passos.append(Passo(descricao, joia_id, NAO_EXECUTADO))
            return False
        try:
            acao()
        except PersistenceError as e:
            self.passos.append(Passo(descricao, joia_id, FALHOU, str(e)))
            log_system_event(
                f"{self.operacao}_passo_falhou",
                {"passo": descricao, "joia_id": joia_id, "error": str(e)},
                level="warning",
            )
            if self.politica is PoliticaFalha.HALT_ON_FAILURE:
                self.interrompida = True
            return False
        self.passos.append(Passo(descricao, joia_id, OK))
        return True
