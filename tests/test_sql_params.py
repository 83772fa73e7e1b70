"""Tests for filter, order, limit, select and aggregate parameters."""

import pytest

from conftest import HASHID_KEY
from conftest import make_api

from namerec.oino import OINOConfig
from namerec.oino import OINOFilterError
from namerec.oino.sql import SqlAggregate
from namerec.oino.sql import SqlFilter
from namerec.oino.sql import SqlLimit
from namerec.oino.sql import SqlOrder
from namerec.oino.sql import SqlParams
from namerec.oino.sql import SqlSelect


class TestSqlFilter:
    """Test the restricted filter grammar."""

    def test_comparison(self) -> None:
        """Test a single comparison rendered through the field literal."""
        datamodel = make_api().datamodel
        assert SqlFilter.parse('(id)-gt(5)').to_sql(datamodel) == '("id" > 5)'
        assert SqlFilter.parse("(name)-eq(O'Brien)").to_sql(datamodel) == '("name" = \'O\'\'Brien\')'
        assert SqlFilter.parse('(name)-ne(x)').to_sql(datamodel) == '("name" <> \'x\')'

    def test_like_keeps_wildcards(self) -> None:
        """Test that LIKE values are plain string literals."""
        datamodel = make_api().datamodel
        assert SqlFilter.parse('(name)-like(a%)').to_sql(datamodel) == '("name" LIKE \'a%\')'

    def test_value_with_brackets(self) -> None:
        """Test that the value runs to the final bracket."""
        datamodel = make_api().datamodel
        assert SqlFilter.parse('(note)-eq(f(x))').to_sql(datamodel) == '("note" = \'f(x)\')'

    def test_boolean_operators(self) -> None:
        """Test nested and/or/not expressions."""
        datamodel = make_api().datamodel
        expression = '((id)-ge(1))-and(-not((name)-eq(b)))'
        assert SqlFilter.parse(expression).to_sql(datamodel) == '(("id" >= 1) AND (NOT ("name" = \'b\')))'

        expression = '((id)-lt(2))-OR((id)-gt(8))'
        assert SqlFilter.parse(expression).to_sql(datamodel) == '(("id" < 2) OR ("id" > 8))'

    @pytest.mark.parametrize('expression', ['id-eq(1)', '(id)-eq', '(id)-between(1)', '((id)-eq(1)', '-not((id)-eq(1)'])
    def test_malformed(self, expression: str) -> None:
        """Test grammar errors."""
        with pytest.raises(OINOFilterError):
            SqlFilter.parse(expression)

    def test_unknown_field_and_invalid_value(self) -> None:
        """Test errors raised while rendering."""
        datamodel = make_api().datamodel
        with pytest.raises(OINOFilterError):
            SqlFilter.parse('(missing)-eq(1)').to_sql(datamodel)
        with pytest.raises(OINOFilterError):
            SqlFilter.parse('(id)-eq(abc)').to_sql(datamodel)

    def test_hashid_key_value(self) -> None:
        """Test that key comparisons accept tokens and reject raw values."""
        datamodel = make_api(hashid_key=HASHID_KEY).datamodel
        token = datamodel.api.hashid.encode('5', 'id 5')

        assert SqlFilter.parse(f'(id)-eq({token})').to_sql(datamodel) == '("id" = 5)'
        with pytest.raises(OINOFilterError):
            SqlFilter.parse('(id)-eq(5)').to_sql(datamodel)


class TestOrderLimitSelect:
    """Test order, limit and select parameters."""

    def test_order(self) -> None:
        """Test directions in both notations."""
        datamodel = make_api().datamodel
        assert SqlOrder.parse('name desc, id').to_sql(datamodel) == '"name" DESC, "id" ASC'
        assert SqlOrder.parse('name-,id+').to_sql(datamodel) == '"name" DESC, "id" ASC'
        with pytest.raises(OINOFilterError):
            SqlOrder.parse('missing').to_sql(datamodel)

    def test_limit(self) -> None:
        """Test limit and page notations."""
        assert SqlLimit.parse('10') == SqlLimit(10, 0)
        assert SqlLimit.parse('10 page 3').offset == 20
        assert SqlLimit.parse('10.2').offset == 10
        assert SqlLimit.parse('10 page 1').offset == 0
        with pytest.raises(OINOFilterError):
            SqlLimit.parse('ten')

    def test_select_keeps_row_shape(self) -> None:
        """Test that unselected columns become placeholders and keys stay selected."""
        datamodel = make_api().datamodel
        sql = datamodel.print_sql_select(sql_params=SqlParams(select=SqlSelect.parse('name')))
        assert sql == (
            'SELECT "id", "name", \'\' AS "amount", \'\' AS "paid", \'\' AS "created", \'\' AS "note" FROM [orders];'
        )


class TestAggregate:
    """Test aggregate parameters."""

    def test_group_by_selected_fields(self) -> None:
        """Test aggregated columns and the GROUP BY list."""
        datamodel = make_api().datamodel
        params = SqlParams(select=SqlSelect.parse('name'), aggregate=SqlAggregate.parse('count(id)'))
        sql = datamodel.print_sql_select(sql_params=params)

        assert sql.startswith('SELECT COUNT("id") AS "id", "name", \'\' AS "amount"')
        assert sql.endswith('FROM [orders] GROUP BY "name";')

    def test_invalid_aggregate(self) -> None:
        """Test unknown functions."""
        with pytest.raises(OINOFilterError):
            SqlAggregate.parse('median(id)')


class TestSqlParams:
    """Test building parameters from a query."""

    def test_from_query(self) -> None:
        """Test the default parameter names."""
        params = SqlParams.from_query({
            'oinosqlfilter': '(id)-gt(1)',
            'oinosqlorder': 'id desc',
            'oinosqllimit': '5 page 2',
            'ignored': 'x',
        })

        assert params.filter == SqlFilter('gt', 'id', '1')
        assert params.order == SqlOrder((('id', True),))
        assert params.limit == SqlLimit(5, 2)
        assert params.select is None
        assert params.aggregate is None

    def test_full_select(self) -> None:
        """Test filter, order and page together."""
        datamodel = make_api().datamodel
        params = SqlParams.from_query({
            'oinosqlfilter': '(name)-like(a%)',
            'oinosqlorder': 'id desc',
            'oinosqllimit': '5 page 2',
        })
        assert datamodel.print_sql_select('3', params).endswith(
            'FROM [orders] WHERE ("id" = 3) AND ("name" LIKE \'a%\') ORDER BY "id" DESC LIMIT 5 OFFSET 5;'
        )

    def test_custom_parameter_names(self) -> None:
        """Test parameter names taken from the configuration."""
        config = OINOConfig(filter_param='where')
        params = SqlParams.from_query({'where': '(id)-eq(1)', 'oinosqlfilter': 'broken'}, config)
        assert params.filter == SqlFilter('eq', 'id', '1')
