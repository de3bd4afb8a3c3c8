"""Tests for Gemini response schema conversion."""

from typing import Optional

import pytest
from pydantic import BaseModel, Field

from generationproxy.models.resume import InterviewPrep
from generationproxy.utils.schema_utils import schema_for, to_gemini_schema


class Address(BaseModel):
    city: str
    zip_code: Optional[str] = None


class Person(BaseModel):
    """A person."""

    title: str = Field(..., description="Job title")
    age: int = 30
    address: Address
    previous: list[Address] = Field(default_factory=list)


def test_types_are_upper_cased_and_unsupported_keys_dropped():
    schema = schema_for(Person)

    assert schema["type"] == "OBJECT"
    assert "title" not in schema
    assert schema["properties"]["age"] == {"type": "INTEGER"}
    assert "$defs" not in schema


def test_property_named_title_survives():
    schema = schema_for(Person)

    assert schema["properties"]["title"] == {"type": "STRING", "description": "Job title"}
    assert "title" in schema["required"]


def test_references_are_inlined():
    schema = schema_for(Person)

    address = schema["properties"]["address"]
    assert address["type"] == "OBJECT"
    assert set(address["properties"]) == {"city", "zip_code"}
    assert schema["properties"]["previous"]["items"]["type"] == "OBJECT"


def test_optional_becomes_nullable():
    schema = schema_for(Person)

    zip_code = schema["properties"]["address"]["properties"]["zip_code"]
    assert zip_code == {"type": "STRING", "nullable": True}


def test_aliases_are_used():
    schema = schema_for(InterviewPrep)

    assert set(schema["properties"]) == {
        "part1_intro",
        "part2_cv",
        "part3_behavioral",
        "part4_technical",
        "part5_reverse",
    }
    question = schema["properties"]["part1_intro"]["items"]
    assert "questionCn" in question["properties"]


def test_input_schema_is_not_mutated():
    original = Person.model_json_schema()
    snapshot = repr(original)

    to_gemini_schema(original)

    assert repr(original) == snapshot


def test_recursive_reference_is_rejected():
    schema = {
        "$defs": {"Node": {"type": "object", "properties": {"child": {"$ref": "#/$defs/Node"}}}},
        "$ref": "#/$defs/Node",
    }

    with pytest.raises(ValueError, match="Recursive"):
        to_gemini_schema(schema)


def test_unknown_reference_is_rejected():
    with pytest.raises(ValueError, match="Unknown"):
        to_gemini_schema({"$ref": "#/$defs/Missing"})
