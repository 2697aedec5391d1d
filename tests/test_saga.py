import pytest

from joias.domain.erros import PersistenceError
from joias.usecases.saga import PoliticaFalha, RelatorioOperacao


def _falha():
    raise PersistenceError("disco cheio", colecao="joias", doc_id="j2")


def _rodar(politica):
    feitos = []
    rel = RelatorioOperacao("baixa_estoque", politica)
    rel.executar("j1", lambda: feitos.append("j1"), joia_id="j1")
    rel.executar("j2", _falha, joia_id="j2")
    rel.executar("j3", lambda: feitos.append("j3"), joia_id="j3")
    return rel, feitos


def test_continuar_apos_falha():
    rel, feitos = _rodar(PoliticaFalha.CONTINUE_ON_FAILURE)
    assert feitos == ["j1", "j3"]
    assert [p.situacao for p in rel.passos] == ["ok", "falhou", "ok"]
    assert rel.falhas[0].erro == "disco cheio"
    assert not rel.interrompida
    assert not rel.sucesso_total


def test_interromper_na_primeira_falha():
    rel, feitos = _rodar(PoliticaFalha.HALT_ON_FAILURE)
    assert feitos == ["j1"]
    assert [p.situacao for p in rel.passos] == ["ok", "falhou", "nao_executado"]
    assert rel.interrompida


def test_ignorado_nao_conta_como_falha():
    rel = RelatorioOperacao("excluir_venda", PoliticaFalha.CONTINUE_ON_FAILURE)
    rel.ignorar("j9", joia_id="j9", motivo="joia não existe mais")
    rel.executar("j1", lambda: None)
    assert rel.sucesso_total
    assert rel.ignorados[0].erro == "joia não existe mais"


def test_outros_erros_propagam():
    rel = RelatorioOperacao("baixa_estoque", PoliticaFalha.CONTINUE_ON_FAILURE)
    with pytest.raises(ZeroDivisionError):
        rel.executar("j1", lambda: 1 / 0)
