from datetime import date, datetime
from math import isclose

import pytest

from joias.domain.erros import ValidationError
from joias.domain.models import DivisaoCaixa, DivisaoLucro
from joias.domain.policies import (
    ajustar_divisao,
    chave_data,
    chave_lote,
    distribuir,
    status_por_quantidade,
    to_title_case,
    validar_divisao,
)


@pytest.mark.parametrize("qtd,esperado", [(0, "vendida"), (1, "disponivel"), (7, "disponivel")])
def test_status_por_quantidade(qtd, esperado):
    assert status_por_quantidade(qtd) == esperado


@pytest.mark.parametrize(
    "txt,esperado",
    [
        ("maria DA silva", "Maria Da Silva"),
        ("  prata 925", "  Prata 925"),
        ("", ""),
        (None, ""),
    ],
)
def test_to_title_case(txt, esperado):
    assert to_title_case(txt) == esperado


def test_chave_data_e_chave_lote():
    assert chave_data(None) == "sem-data"
    assert chave_data(date(2024, 3, 10)) == "2024-03-10"
    assert chave_data(datetime(2024, 3, 10, 15, 30)) == "2024-03-10"
    assert chave_lote("Atacado Sp", "2024-03-10T12:00:00") == "Atacado Sp__2024-03-10"
    assert chave_lote("Atacado Sp", None) == "Atacado Sp__sem-data"


def test_ajustar_divisao_sem_excesso_nao_mexe_nos_outros():
    d = ajustar_divisao(DivisaoLucro(), "lucro_liquido", 10)
    assert (d.reinvestimento, d.reserva_emergencia, d.lucro_liquido) == (50, 30, 10)


def test_ajustar_divisao_redistribui_excesso_proporcionalmente():
    original = DivisaoLucro(50, 30, 20)
    d = ajustar_divisao(original, "reinvestimento", 60)
    # excesso 10 sai de 30 e 20 na proporção 3:2
    assert isclose(d.reserva_emergencia, 24.0)
    assert isclose(d.lucro_liquido, 16.0)
    assert isclose(d.reinvestimento + d.reserva_emergencia + d.lucro_liquido, 100.0)
    assert original.reinvestimento == 50


def test_ajustar_divisao_nunca_abaixo_de_zero():
    d = ajustar_divisao(DivisaoCaixa(50, 30, 20), "salario", 150)
    assert d.reinvestimento == 0.0
    assert d.caixa_loja == 0.0


def test_ajustar_divisao_limitada():
    d = ajustar_divisao(DivisaoCaixa(50, 30, 20), "salario", 150, limitar=True)
    assert d.salario == 100.0
    assert d.reinvestimento == 0.0 and d.caixa_loja == 0.0


def test_ajustar_divisao_campo_desconhecido():
    with pytest.raises(ValidationError):
        ajustar_divisao(DivisaoLucro(), "xpto", 10)


def test_validar_divisao():
    validar_divisao(DivisaoLucro(50, 30, 20))
    with pytest.raises(ValidationError, match="100%"):
        validar_divisao(DivisaoLucro(50, 30, 10))
    with pytest.raises(ValidationError):
        validar_divisao(DivisaoCaixa(120, -10, -10))


def test_distribuir():
    partes = distribuir(200.0, DivisaoLucro(50, 30, 20))
    assert partes == {"reinvestimento": 100.0, "reserva_emergencia": 60.0, "lucro_liquido": 40.0}
