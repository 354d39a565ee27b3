import datetime as dt

import pytest

from conftest import make_contract

from contract_radar.services.contracts.collation import spanish_sort_key
from contract_radar.services.contracts.contract_models import (
    RiskLevel,
    SortDirection,
    SortField,
)
from contract_radar.services.contracts.contract_sorter import SORT_KEYS, sort_contracts


def _ids(contracts):
    return [c.id for c in contracts]


class TestSortContracts:
    def test_no_field_keeps_order(self):
        contracts = [make_contract("B"), make_contract("A")]
        out = sort_contracts(contracts)
        assert _ids(out) == ["B", "A"]
        assert out is not contracts

    def test_amount_descending_is_stable(self):
        contracts = [
            make_contract("first", amount=100),
            make_contract("mid", amount=50),
            make_contract("second", amount=100),
            make_contract("zero", amount=0),
        ]
        out = sort_contracts(contracts, SortField.AMOUNT, SortDirection.DESC)
        assert _ids(out) == ["first", "second", "mid", "zero"]

    @pytest.mark.parametrize("field", list(SortField))
    @pytest.mark.parametrize("direction", list(SortDirection))
    def test_equal_keys_keep_input_order(self, field, direction):
        contracts = [
            make_contract(
                "same",
                entity="Entidad",
                amount=10,
                date=dt.date(2024, 1, 1),
                risk_level=RiskLevel.MEDIUM,
                anomaly_probability=50,
                name=f"row-{i}",
            )
            for i in range(5)
        ]
        out = sort_contracts(contracts, field, direction)
        assert [c.name for c in out] == [f"row-{i}" for i in range(5)]

    @pytest.mark.parametrize("field", list(SortField))
    def test_output_is_ordered_by_key(self, field):
        contracts = [
            make_contract("B-2", entity="Zeta", amount=5, date=dt.date(2023, 5, 1),
                          risk_level=RiskLevel.LOW, anomaly_probability=70),
            make_contract("A-1", entity="alcaldía", amount=500, date=None,
                          risk_level=RiskLevel.HIGH, anomaly_probability=20),
            make_contract("C-3", entity="Ñame S.A.", amount=50, date=dt.date(2024, 1, 1),
                          risk_level=RiskLevel.MEDIUM, anomaly_probability=45),
        ]
        key = SORT_KEYS[field]

        asc = sort_contracts(contracts, field, SortDirection.ASC)
        desc = sort_contracts(contracts, field, SortDirection.DESC)

        assert [key(c) for c in asc] == sorted(key(c) for c in contracts)
        assert [key(c) for c in desc] == sorted((key(c) for c in contracts), reverse=True)
        assert sorted(_ids(asc)) == sorted(_ids(contracts))

    def test_risk_level_uses_severity_not_label(self):
        contracts = [
            make_contract("low", risk_level=RiskLevel.LOW),
            make_contract("high", risk_level=RiskLevel.HIGH),
            make_contract("medium", risk_level=RiskLevel.MEDIUM),
        ]
        assert _ids(sort_contracts(contracts, SortField.RISK_LEVEL, SortDirection.DESC)) == [
            "high", "medium", "low",
        ]
        assert _ids(sort_contracts(contracts, SortField.RISK_LEVEL, SortDirection.ASC)) == [
            "low", "medium", "high",
        ]

    def test_missing_dates_sort_last_ascending(self):
        contracts = [
            make_contract("none", date=None),
            make_contract("new", date=dt.date(2024, 6, 1)),
            make_contract("old", date=dt.date(2020, 1, 1)),
        ]
        assert _ids(sort_contracts(contracts, SortField.DATE)) == ["old", "new", "none"]
        assert _ids(sort_contracts(contracts, SortField.DATE, SortDirection.DESC)) == ["none", "new", "old"]

    def test_entity_uses_spanish_collation(self):
        contracts = [
            make_contract("1", entity="Oso"),
            make_contract("2", entity="Ñandú"),
            make_contract("3", entity="Nube"),
            make_contract("4", entity="Álamo"),
            make_contract("5", entity="Beta"),
        ]
        out = sort_contracts(contracts, SortField.ENTITY)
        assert [c.entity for c in out] == ["Álamo", "Beta", "Nube", "Ñandú", "Oso"]

    def test_accepts_raw_values(self):
        contracts = [make_contract("a", amount=1), make_contract("b", amount=2)]
        assert _ids(sort_contracts(contracts, "amount", "desc")) == ["b", "a"]

    def test_input_is_not_modified(self):
        contracts = [make_contract("b", amount=2), make_contract("a", amount=1)]
        sort_contracts(contracts, SortField.AMOUNT)
        assert _ids(contracts) == ["b", "a"]


class TestSpanishSortKey:
    def test_accents_are_secondary(self):
        assert spanish_sort_key("alvaro") < spanish_sort_key("Álvaro") < spanish_sort_key("beatriz")

    def test_case_is_tertiary(self):
        assert spanish_sort_key("abc") < spanish_sort_key("Abc")
        assert spanish_sort_key("Abc") < spanish_sort_key("abd")

    def test_enye_follows_n(self):
        assert spanish_sort_key("nz") < spanish_sort_key("ña") < spanish_sort_key("oa")

    def test_decomposed_input_matches_composed(self):
        assert spanish_sort_key("n\u0303a") == spanish_sort_key("\u00f1a")
