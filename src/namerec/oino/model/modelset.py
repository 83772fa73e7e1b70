"""Data model paired with a result set, serializable to any wire format."""

from namerec.oino.codecs import write_rows
from namerec.oino.core.result import OINOResult
from namerec.oino.core.types import UNDEFINED
from namerec.oino.core.types import Cell
from namerec.oino.core.types import ContentType
from namerec.oino.core.types import Row
from namerec.oino.db.dataset import DataSet
from namerec.oino.model.datamodel import DataModel


class ModelSet:
    """
    Rows of a data set interpreted through a data model.

    Attributes:
        datamodel: Model the rows follow
        dataset: Raw rows from the database
        result: Collects writer warnings (e.g. rows dropped by single-row formats)
    """

    def __init__(self, datamodel: DataModel, dataset: DataSet) -> None:
        self.datamodel = datamodel
        self.dataset = dataset
        self.result = OINOResult()

    def _typed_row(self, raw: list[object]) -> Row:
        return [field.parse_sql_value(value) for field, value in zip(self.datamodel.fields, raw, strict=False)]

    def current_row(self) -> Row:
        """Current row with values normalized to cells."""
        raw = self.dataset.current_row()
        return self._typed_row(raw) if raw else []

    def get_value_by_field_name(self, name: str) -> Cell:
        """
        Cell of the current row for a field.

        Returns:
            Cell, or UNDEFINED if the field is unknown or the set is at end
        """
        index = self.datamodel.find_field_index_by_name(name)
        row = self.current_row()
        if index < 0 or index >= len(row):
            return UNDEFINED
        return row[index]

    async def rows(self) -> list[Row]:
        """Remaining rows as cells; consumes the data set."""
        return [self._typed_row(raw) for raw in await self.dataset.all_rows()]

    async def write_string(self, content_type: ContentType = ContentType.JSON) -> str:
        """
        Serialize the remaining rows.

        Args:
            content_type: Wire format

        Returns:
            Serialized rows
        """
        return write_rows(self.datamodel, await self.rows(), content_type, self.result)
