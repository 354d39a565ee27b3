import datetime as dt

from contract_radar.services.contracts.contract_models import FilterSpec, RiskLevel
from contract_radar.services.contracts.query_builder import (
    build_query_params,
    build_query_string,
    clamp_limit,
)


class TestQueryBuilder:
    def test_no_filters_gives_empty_query(self):
        assert build_query_string() == ""
        assert build_query_string(FilterSpec()) == ""

    def test_all_filters_in_canonical_order(self):
        filters = FilterSpec(
            date_from=dt.date(2024, 1, 1),
            date_to=dt.date(2024, 12, 31),
            min_amount=1000.0,
            max_amount=2500000.5,
            name="equipos",
            contract_id="CO1.PCCNTR.1",
        )
        assert build_query_string(filters, limit=50) == (
            "limit=50&fecha_desde=2024-01-01&fecha_hasta=2024-12-31"
            "&valor_minimo=1000&valor_maximo=2500000.5"
            "&nombre_contrato=equipos&id_contrato=CO1.PCCNTR.1"
        )

    def test_limit_is_clamped(self):
        assert clamp_limit(0) == 1
        assert clamp_limit(-5) == 1
        assert clamp_limit(500) == 100
        assert build_query_string(limit=250) == "limit=100"
        assert build_query_string(limit=0) == "limit=1"

    def test_short_name_is_omitted(self):
        assert build_query_string(FilterSpec(name="ab")) == ""
        assert build_query_string(FilterSpec(name="abc")) == "nombre_contrato=abc"

    def test_risk_levels_never_sent(self):
        filters = FilterSpec(risk_levels=frozenset({RiskLevel.HIGH}))
        assert build_query_string(filters) == ""

    def test_zero_amount_is_kept(self):
        assert build_query_params(FilterSpec(min_amount=0)) == [("valor_minimo", "0")]

    def test_negative_amount_passes_through(self):
        assert build_query_params(FilterSpec(min_amount=-10)) == [("valor_minimo", "-10")]

    def test_values_are_url_encoded(self):
        assert build_query_string(FilterSpec(name="obra pública")) == "nombre_contrato=obra+p%C3%BAblica"

    def test_filters_are_not_mutated(self):
        filters = FilterSpec(name="equipos", risk_levels=frozenset({RiskLevel.LOW}))
        before = filters.model_dump()
        build_query_string(filters, limit=10)
        assert filters.model_dump() == before
