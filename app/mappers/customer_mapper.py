"""
app/mappers/customer_mapper.py

Maps parsed CSV rows to Customer records and serializes them for storage.
"""

from __future__ import annotations

import json
import re
from dataclasses import fields
from typing import Any, Sequence

from app.domain.customer import Customer

CUSTOMER_COLUMNS: tuple[str, ...] = (
    "id",
    "first_name",
    "last_name",
    "age",
    "street_address",
)

_KNOWN_FIELDS = frozenset(field.name for field in fields(Customer)) - {"extra"}
_IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z0-9._:-]+$")


class MappingError(ValueError):
    """
    Raised when a parsed row cannot become a Customer.
    """

    def __init__(self, message: str, *, column: str | None = None, value: str | None = None) -> None:
        super().__init__(message)
        self.column = column
        self.value = value


class CustomerMapper:
    """
    Positional row-to-Customer mapper.

    Columns outside the known Customer fields are kept in ``Customer.extra``
    so the column contract can grow without code changes.
    """

    def __init__(self, columns: Sequence[str] = CUSTOMER_COLUMNS) -> None:
        if not columns or columns[0] != "id":
            raise ValueError("The first import column must be the identifier 'id'.")
        self.columns = tuple(columns)

    def map_row(self, values: Sequence[str]) -> Customer:
        if len(values) != len(self.columns):
            raise MappingError(
                f"Expected {len(self.columns)} values, found {len(values)}.",
            )

        row = dict(zip(self.columns, (value.strip() for value in values)))

        identifier = row.get("id") or ""
        if not identifier:
            raise MappingError("Missing required identifier.", column="id", value=identifier)
        if not _IDENTIFIER_PATTERN.match(identifier):
            raise MappingError(
                f"Identifier '{identifier}' contains unsupported characters.",
                column="id",
                value=identifier,
            )

        known: dict[str, Any] = {
            name: (row[name] or None) for name in self.columns if name in _KNOWN_FIELDS
        }
        known["id"] = identifier
        if "age" in known:
            known["age"] = self._parse_age(row["age"])

        extra = {name: row[name] for name in self.columns if name not in _KNOWN_FIELDS and row[name]}
        return Customer(**known, extra=extra)

    @staticmethod
    def _parse_age(raw: str) -> int | None:
        if not raw:
            return None
        try:
            age = int(raw)
        except ValueError as exc:
            raise MappingError(f"Age '{raw}' is not a whole number.", column="age", value=raw) from exc
        if age < 0:
            raise MappingError(f"Age '{raw}' must not be negative.", column="age", value=raw)
        return age


class CustomerSerializer:
    """
    Renders a Customer as the JSON document stored in the object service.

    ``naming_policy`` is "camel" (firstName) or "snake" (first_name).
    """

    def __init__(self, *, naming_policy: str = "camel", omit_none: bool = True) -> None:
        if naming_policy not in {"camel", "snake"}:
            raise ValueError(f"Unsupported naming policy '{naming_policy}'.")
        self._naming_policy = naming_policy
        self._omit_none = omit_none

    def to_document(self, customer: Customer) -> dict[str, Any]:
        document: dict[str, Any] = {}
        for field in fields(Customer):
            if field.name == "extra":
                continue
            value = getattr(customer, field.name)
            if value is None and self._omit_none:
                continue
            document[self._key(field.name)] = value
        for name, value in customer.extra.items():
            document[self._key(name)] = value
        return document

    def serialize(self, customer: Customer) -> str:
        return json.dumps(self.to_document(customer), ensure_ascii=False)

    def _key(self, name: str) -> str:
        if self._naming_policy == "camel":
            return _to_camel(name)
        return name


def _to_camel(name: str) -> str:
    head, *tail = name.split("_")
    return head + "".join(part[:1].upper() + part[1:] for part in tail)

