from datetime import date

import pytest

from joias.adapters.parsers import parse_data, parse_item_venda, parse_valor


@pytest.mark.parametrize(
    "txt,esperado",
    [
        ("2024-03-10", date(2024, 3, 10)),
        ("2024-03-10T08:15:00", date(2024, 3, 10)),
        ("10/03/2024", date(2024, 3, 10)),
        ("10-03-2024", date(2024, 3, 10)),
        ("", None),
        (None, None),
    ],
)
def test_parse_data(txt, esperado):
    assert parse_data(txt) == esperado


def test_parse_data_invalida():
    with pytest.raises(ValueError):
        parse_data("amanhã")


@pytest.mark.parametrize(
    "txt,esperado",
    [
        ("149,90", 149.9),
        ("R$ 1.234,56", 1234.56),
        ("12.5", 12.5),
        ("1,234.56", 1234.56),
        (7, 7.0),
        ("abc", None),
        (None, None),
    ],
)
def test_parse_valor(txt, esperado):
    assert parse_valor(txt) == esperado


@pytest.mark.parametrize(
    "txt,esperado",
    [
        ("an001", ("AN001", 1, None)),
        ("AN001:3", ("AN001", 3, None)),
        ("AN001:2@149,90", ("AN001", 2, 149.9)),
        ("AN001@80", ("AN001", 1, 80.0)),
    ],
)
def test_parse_item_venda(txt, esperado):
    assert parse_item_venda(txt) == esperado


@pytest.mark.parametrize("txt", ["", "AN001:x", "AN001@abc"])
def test_parse_item_venda_invalido(txt):
    with pytest.raises(ValueError):
        parse_item_venda(txt)
