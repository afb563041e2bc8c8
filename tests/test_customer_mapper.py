from __future__ import annotations

import json
import unittest

from app.domain.customer import Customer
from app.mappers.customer_mapper import CustomerMapper, CustomerSerializer, MappingError


class TestCustomerMapper(unittest.TestCase):
    def setUp(self) -> None:
        self.mapper = CustomerMapper()

    def test_maps_fixed_column_order(self) -> None:
        customer = self.mapper.map_row(("1", "John", "Doe", "24", "1234 Main St"))

        self.assertEqual(
            customer,
            Customer(id="1", first_name="John", last_name="Doe", age=24, street_address="1234 Main St"),
        )

    def test_missing_identifier_raises(self) -> None:
        with self.assertRaises(MappingError) as ctx:
            self.mapper.map_row(("", "Jane", "Doe", "25", "2345 Main St"))

        self.assertEqual(ctx.exception.column, "id")

    def test_non_numeric_age_raises(self) -> None:
        with self.assertRaises(MappingError) as ctx:
            self.mapper.map_row(("5", "Jane", "Doe", "twenty", "2345 Main St"))

        self.assertEqual(ctx.exception.column, "age")
        self.assertIn("twenty", str(ctx.exception))

    def test_negative_age_raises(self) -> None:
        with self.assertRaises(MappingError):
            self.mapper.map_row(("5", "Jane", "Doe", "-1", "2345 Main St"))

    def test_identifier_with_path_characters_raises(self) -> None:
        with self.assertRaises(MappingError):
            self.mapper.map_row(("a/b", "Jane", "Doe", "25", "2345 Main St"))

    def test_blank_optional_values_become_none(self) -> None:
        customer = self.mapper.map_row(("7", "", "Lee", "", ""))

        self.assertIsNone(customer.first_name)
        self.assertIsNone(customer.age)

    def test_extended_columns_are_kept_as_extra(self) -> None:
        mapper = CustomerMapper(columns=("id", "first_name", "last_name", "age", "street_address", "loyalty_tier"))

        customer = mapper.map_row(("8", "Drew", "Lee", "56", "4567 Main St", "gold"))

        self.assertEqual(customer.extra, {"loyalty_tier": "gold"})

    def test_first_column_must_be_identifier(self) -> None:
        with self.assertRaises(ValueError):
            CustomerMapper(columns=("first_name", "id"))


class TestCustomerSerializer(unittest.TestCase):
    def test_camel_case_policy_omits_nulls(self) -> None:
        serializer = CustomerSerializer(naming_policy="camel", omit_none=True)
        customer = Customer(id="1", first_name="John", last_name="Doe", age=24, street_address=None)

        document = json.loads(serializer.serialize(customer))

        self.assertEqual(document, {"id": "1", "firstName": "John", "lastName": "Doe", "age": 24})

    def test_snake_case_policy_keeps_nulls_when_asked(self) -> None:
        serializer = CustomerSerializer(naming_policy="snake", omit_none=False)

        document = serializer.to_document(Customer(id="2"))

        self.assertEqual(
            document,
            {"id": "2", "first_name": None, "last_name": None, "age": None, "street_address": None},
        )

    def test_extra_fields_follow_naming_policy(self) -> None:
        serializer = CustomerSerializer()

        document = serializer.to_document(Customer(id="3", extra={"loyalty_tier": "gold"}))

        self.assertEqual(document["loyaltyTier"], "gold")

    def test_unknown_policy_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            CustomerSerializer(naming_policy="kebab")


if __name__ == "__main__":
    unittest.main()
