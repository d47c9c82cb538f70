"""Tests for the summary row aggregator."""

from decimal import Decimal

import pytest

from finance_exports.models.export import (
    AggregationType,
    ColumnType,
    ExportColumn,
    ExportFormatting,
)
from finance_exports.pipeline import (
    EN_US,
    PT_BR,
    Aggregator,
    ColumnProjector,
    compute_statistic,
)


@pytest.fixture
def aggregator() -> Aggregator:
    return Aggregator(ExportFormatting(), PT_BR)


def _amount(aggregation: AggregationType = AggregationType.SUM) -> ExportColumn:
    return ExportColumn(
        key="amount",
        title="Amount",
        type=ColumnType.CURRENCY,
        aggregation=aggregation,
    )


class TestSummaryRow:
    """Tests for the shape of the summary row."""

    def test_formatted_values_are_reparsed(self, aggregator):
        """Currency strings lose symbol and punctuation before summing."""
        columns = [
            ExportColumn(key="description", title="Description"),
            _amount(),
        ]
        projector = ColumnProjector(ExportFormatting(), PT_BR)
        rows = projector.project(
            [{"description": "a", "amount": 10.50},
             {"description": "b", "amount": -5.25},
             {"description": "c", "amount": 100.00}],
            columns,
        )
        assert [row["Amount"] for row in rows] == ["R$ 10,50", "-R$ 5,25", "R$ 100,00"]

        summary = aggregator.summarize(rows, columns)
        assert summary == {"Description": "TOTAL", "Amount": "R$ 10.525,00"}

    def test_label_goes_in_first_visible_column(self):
        """Hidden columns are skipped when placing the label."""
        aggregator = Aggregator(ExportFormatting(), PT_BR, label="Total geral")
        columns = [
            ExportColumn(key="id", title="Id", visible=False),
            ExportColumn(key="category", title="Category"),
            ExportColumn(key="note", title="Note"),
            _amount(),
        ]
        summary = aggregator.summarize([{"Category": "x", "Note": "y", "Amount": "R$ 1,00"}], columns)
        assert summary == {"Category": "Total geral", "Note": "", "Amount": "R$ 100,00"}

    def test_no_aggregation_means_no_summary(self, aggregator):
        """Without aggregated columns there is no summary row."""
        columns = [ExportColumn(key="description", title="Description")]
        assert aggregator.summarize([{"Description": "a"}], columns) is None

    def test_hidden_aggregated_column_is_ignored(self, aggregator):
        """Only visible columns take part."""
        hidden = _amount().model_copy(update={"visible": False})
        columns = [ExportColumn(key="description", title="Description"), hidden]
        assert aggregator.summarize([{"Description": "a"}], columns) is None


class TestStatistics:
    """Tests for each aggregation type."""

    def test_count_is_an_int(self, aggregator):
        columns = [ExportColumn(
            key="description",
            title="Description",
            aggregation=AggregationType.COUNT,
        )]
        rows = [{"Description": "a"}, {"Description": "b"}, {"Description": None}]
        assert aggregator.summarize(rows, columns) == {"Description": 3}

    def test_average_of_currency(self, aggregator):
        """Currency statistics are rendered as currency."""
        rows = [{"Amount": "R$ 10,00"}, {"Amount": "R$ 1.020,00"}]
        summary = aggregator.summarize(rows, [_amount(AggregationType.AVG)])
        assert summary == {"Amount": "R$ 51.500,00"}

    def test_min_and_max(self, aggregator):
        rows = [{"Amount": "-R$ 5,25"}, {"Amount": "R$ 100,00"}]
        assert aggregator.summarize(rows, [_amount(AggregationType.MIN)]) == {"Amount": "-R$ 525,00"}
        assert aggregator.summarize(rows, [_amount(AggregationType.MAX)]) == {"Amount": "R$ 10.000,00"}

    def test_number_column_renders_float(self, aggregator):
        """Non-currency statistics are floats."""
        column = ExportColumn(
            key="qty",
            title="Qty",
            type=ColumnType.NUMBER,
            aggregation=AggregationType.AVG,
        )
        rows = [{"Qty": "10,00"}, {"Qty": "20,00"}]
        assert aggregator.summarize(rows, [column]) == {"Qty": 15.0}

    def test_percentage_strings(self, aggregator):
        """The '%' suffix is stripped before parsing."""
        column = ExportColumn(
            key="share",
            title="Share",
            type=ColumnType.PERCENTAGE,
            aggregation=AggregationType.SUM,
        )
        rows = [{"Share": "12.50%"}, {"Share": "37.50%"}]
        assert aggregator.summarize(rows, [column]) == {"Share": 50.0}

    def test_unparseable_values_count_as_zero(self, aggregator):
        rows = [{"Amount": "n/a"}, {"Amount": None}, {"Amount": "R$ 2,00"}]
        assert aggregator.summarize(rows, [_amount()]) == {"Amount": "R$ 200,00"}

    def test_raw_numbers_are_used_directly(self, aggregator):
        rows = [{"Amount": 1.5}, {"Amount": Decimal("2.25")}]
        assert aggregator.summarize(rows, [_amount()]) == {"Amount": "R$ 3,75"}

    def test_en_us_reparse(self):
        """Both separators are stripped whatever the locale."""
        aggregator = Aggregator(ExportFormatting(), EN_US)
        rows = [{"Amount": "R$ 1,234.50"}, {"Amount": "R$ 0.50"}]
        assert aggregator.summarize(rows, [_amount()]) == {"Amount": "R$ 123,500.00"}

    def test_column_currency_pattern(self, aggregator):
        """A column's own currency pattern decides what is a symbol."""
        column = _amount().model_copy(update={"format": "#,##0.00 €"})
        rows = [{"Amount": "1.234,50 €"}, {"Amount": "0,50 €"}]
        assert aggregator.summarize(rows, [column]) == {"Amount": "123.500,00 €"}


class TestEmptyInput:
    """Aggregating over no rows never produces NaN."""

    def test_sum_and_count_are_zero(self, aggregator):
        assert aggregator.summarize([], [_amount()]) == {"Amount": "R$ 0,00"}
        count = ExportColumn(key="n", title="N", aggregation=AggregationType.COUNT)
        assert aggregator.summarize([], [count]) == {"N": 0}

    @pytest.mark.parametrize("aggregation", [
        AggregationType.AVG,
        AggregationType.MIN,
        AggregationType.MAX,
    ])
    def test_avg_min_max_are_none(self, aggregator, aggregation):
        assert aggregator.summarize([], [_amount(aggregation)]) == {"Amount": None}

    def test_compute_statistic_directly(self):
        assert compute_statistic(AggregationType.SUM, []) == Decimal(0)
        assert compute_statistic(AggregationType.AVG, []) is None
        assert compute_statistic(AggregationType.MAX, [Decimal(1), Decimal(3)]) == Decimal(3)
