"""Registry of known report sources and their column mappings.

Each upstream block list exports numbers and labels under different names.
CSV exports are looked up by file name; SQLite dumps by a short source name.
"""

from __future__ import annotations

import re
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, field_validator

_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class UnknownSourceError(RuntimeError):
    """Raised when a source name is not registered."""


class CsvSource(BaseModel):
    """Column mapping for a CSV export."""

    model_config = ConfigDict(frozen=True)

    file_name: str
    number_field: str
    type_field: str

    @property
    def output_file(self) -> str:
        return self.file_name


class DatabaseSource(BaseModel):
    """Table and column mapping for a SQLite dump."""

    model_config = ConfigDict(frozen=True)

    name: str
    db_file: str
    table: str
    number_field: str
    type_field: str
    output_file: str

    @field_validator("table", "number_field", "type_field")
    @classmethod
    def _check_identifier(cls, value: str) -> str:
        if not _IDENTIFIER.match(value):
            raise ValueError(f"not a plain SQL identifier: {value!r}")
        return value


CSV_SOURCES: Dict[str, CsvSource] = {
    source.file_name: source
    for source in (
        CsvSource(file_name="sola.csv", number_field="number", type_field="fullName"),
        CsvSource(file_name="clean_call.csv", number_field="phone_number", type_field="name"),
        CsvSource(file_name="ntrust_part1.csv", number_field="dial_id", type_field="type_tag"),
        CsvSource(file_name="ntrust_part2.csv", number_field="dial_id", type_field="type_tag"),
        CsvSource(file_name="ntrust_part3.csv", number_field="dial_id", type_field="type_tag"),
    )
}

DATABASE_SOURCES: Dict[str, DatabaseSource] = {
    source.name: source
    for source in (
        DatabaseSource(
            name="sorac",
            db_file="sorac.db",
            table="User",
            number_field="number",
            type_field="fullName",
            output_file="sorac_clean.csv",
        ),
        DatabaseSource(
            name="ntrust",
            db_file="ntrust.db",
            table="phone_number",
            number_field="dial_id",
            type_field="type_tag",
            output_file="ntrust_clean.csv",
        ),
        DatabaseSource(
            name="cleancall",
            db_file="cleancall.db",
            table="identifications",
            number_field="phone_number",
            type_field="name",
            output_file="cleancall_clean.csv",
        ),
    )
}


def list_csv_sources() -> List[str]:
    return list(CSV_SOURCES)


def list_database_sources() -> List[str]:
    return list(DATABASE_SOURCES)


def get_csv_source(file_name: str) -> CsvSource:
    """Return the mapping for ``file_name`` or raise :class:`UnknownSourceError`."""
    try:
        return CSV_SOURCES[file_name]
    except KeyError:
        raise UnknownSourceError(
            f"No configuration found for file: {file_name}. Available: {', '.join(CSV_SOURCES)}"
        ) from None


def get_database_source(name: str) -> DatabaseSource:
    """Return the mapping for ``name`` or raise :class:`UnknownSourceError`."""
    try:
        return DATABASE_SOURCES[name]
    except KeyError:
        raise UnknownSourceError(
            f"No configuration found for database: {name}. Available: {', '.join(DATABASE_SOURCES)}"
        ) from None
