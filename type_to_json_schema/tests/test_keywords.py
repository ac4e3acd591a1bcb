"""
Unit tests for tag keyword constraints.
"""

import pytest

from type_to_json_schema.keywords import (
    apply_field_keywords,
    array_keywords,
    numeric_keywords,
    parse_bool,
    parse_int,
    parse_number,
    string_keywords,
)
from type_to_json_schema.schema_ast import Type
from type_to_json_schema.tags import FieldAnnotation, SchemaTag


def annotation(tag, description=""):
    return FieldAnnotation(name="field", schema_tag=SchemaTag.parse(tag), description=description)


class TestParsing:
    def test_parse_int(self):
        assert parse_int("12") == 12
        assert parse_int("-3") == -3
        assert parse_int("1.5") is None
        assert parse_int("abc") is None

    def test_parse_number(self):
        assert parse_number("7") == 7
        assert parse_number("0.25") == 0.25
        assert parse_number("nope") is None
        assert parse_number("inf") is None

    @pytest.mark.parametrize("value", ["1", "t", "T", "TRUE", "true", "True"])
    def test_parse_bool_true(self, value):
        assert parse_bool(value) is True

    @pytest.mark.parametrize("value", ["0", "f", "false", "yes", ""])
    def test_parse_bool_false(self, value):
        assert parse_bool(value) is False


class TestStringKeywords:
    def test_all_keywords(self):
        node = Type(type="string")
        string_keywords(node, SchemaTag.parse("minLength=2,maxLength=8,pattern=^a,format=uri,default=ab,example=ab,example=abc"))
        assert node.to_dict() == {
            "type": "string",
            "minLength": 2,
            "maxLength": 8,
            "pattern": "^a",
            "format": "uri",
            "default": "ab",
            "examples": ["ab", "abc"],
        }

    def test_unknown_format_keeps_previous(self):
        node = Type(type="string")
        string_keywords(node, SchemaTag.parse("format=email,format=phone"))
        assert node.format == "email"

    def test_later_value_wins(self):
        node = Type(type="string")
        string_keywords(node, SchemaTag.parse("minLength=1,minLength=4"))
        assert node.min_length == 4


class TestNumericKeywords:
    def test_all_keywords(self):
        node = Type(type="integer")
        numeric_keywords(node, SchemaTag.parse("multipleOf=5,minimum=0,maximum=100,exclusiveMinimum=true,exclusiveMaximum=false,default=10,example=15"))
        assert node.to_dict() == {
            "type": "integer",
            "multipleOf": 5,
            "minimum": 0,
            "maximum": 100,
            "exclusiveMinimum": True,
            "default": 10,
            "examples": [15],
        }

    def test_unparseable_values(self):
        node = Type(type="number")
        numeric_keywords(node, SchemaTag.parse("minimum=low,maximum=3,maximum=high,exclusiveMaximum=maybe,default=x,example=y"))
        assert node.minimum is None
        assert node.maximum is None
        assert node.exclusive_maximum is False
        assert node.default == 0
        assert node.examples == []

    def test_multiple_of_must_be_positive(self):
        for tag in ("multipleOf=0", "multipleOf=-2", "multipleOf=x"):
            node = Type(type="integer")
            numeric_keywords(node, SchemaTag.parse(tag))
            assert "multipleOf" not in node.to_dict()


class TestArrayKeywords:
    def test_all_keywords(self):
        node = Type(type="array", items=Type(type="string"))
        array_keywords(node, SchemaTag.parse("minItems=1,maxItems=4,uniqueItems=true,default=x,default=y"))
        assert node.min_items == 1
        assert node.max_items == 4
        assert node.unique_items is True
        assert node.default == ["x", "y"]

    def test_unique_items_flag(self):
        node = Type(type="array")
        array_keywords(node, SchemaTag.parse("uniqueItems"))
        assert node.unique_items is True
        assert node.default is None

    def test_unparseable_bounds_are_omitted(self):
        node = Type(type="array", items=Type(type="string"))
        array_keywords(node, SchemaTag.parse("minItems=1,maxItems=ten"))
        assert node.to_dict() == {"type": "array", "items": {"type": "string"}, "minItems": 1}

    def test_explicit_zero_is_kept(self):
        node = Type(type="array")
        array_keywords(node, SchemaTag.parse("minItems=0"))
        assert node.to_dict() == {"type": "array", "minItems": 0}


class TestApplyFieldKeywords:
    def test_dispatch_by_type(self):
        tag = "minLength=3,minimum=3,minItems=3"
        string, integer, array = Type(type="string"), Type(type="integer"), Type(type="array")
        for node in (string, integer, array):
            apply_field_keywords(node, annotation(tag))

        assert (string.min_length, string.minimum, string.min_items) == (3, None, None)
        assert (integer.min_length, integer.minimum, integer.min_items) == (None, 3, None)
        assert (array.min_length, array.minimum, array.min_items) == (None, None, 3)

    def test_reference_gets_generic_keywords_only(self):
        node = Type(ref="#/definitions/Thing")
        apply_field_keywords(node, annotation("title=Thing,minLength=3"))
        assert node.title == "Thing"
        assert node.min_length is None

    def test_description_tag_is_overridden_by_keyword(self):
        node = Type(type="boolean")
        apply_field_keywords(node, annotation("", description="from tag"))
        assert node.description == "from tag"

        apply_field_keywords(node, annotation("description=from keyword", description="from tag"))
        assert node.description == "from keyword"

    def test_required_flag_is_not_a_keyword(self):
        node = Type(type="string")
        apply_field_keywords(node, annotation("required,minLength=1"))
        assert node.to_dict() == {"type": "string", "minLength": 1}
