"""
Unit tests for the type classifier.
"""

import enum
import http.client
from dataclasses import dataclass
from typing import Annotated, Any, Dict, List, Optional, Union

import pytest
from typeschema.contracts import ContractResolver
from typeschema.registry import TypeKind, classify
from typeschema.schema import Schema


class Color(enum.Enum):
    RED = 1
    GREEN = 2


@dataclass
class Invoice:
    number: str
    total: float


class LoggedResponse(http.client.HTTPResponse):
    pass


@pytest.fixture
def resolver():
    return ContractResolver()


class TestClassifier:
    """Test dispatch order and tags."""

    @pytest.mark.parametrize("type_,kind", [
        (int, TypeKind.PRIMITIVE),
        (Optional[int], TypeKind.NULLABLE),
        (Annotated[str, "label"], TypeKind.NULLABLE),
        (Color, TypeKind.ENUM),
        (List[Invoice], TypeKind.SEQUENCE),
        (Dict[str, Invoice], TypeKind.MAP),
        (Invoice, TypeKind.OBJECT),
        (Any, TypeKind.OPAQUE),
        (object, TypeKind.OPAQUE),
        (Union[int, str], TypeKind.OPAQUE),
        (http.client.HTTPResponse, TypeKind.OPAQUE),
        (LoggedResponse, TypeKind.OPAQUE),
    ])
    def test_kinds(self, resolver, type_, kind):
        """Test the tag assigned to representative types."""
        assert classify(type_, resolver).kind == kind

    def test_nullable_carries_inner_type(self, resolver):
        """Test that Optional unwraps to its inner type."""
        classification = classify(Optional[Invoice], resolver)

        assert classification.inner is Invoice

    def test_pipe_union_with_none(self, resolver):
        """Test PEP 604 optional syntax."""
        classification = classify(Invoice | None, resolver)

        assert classification.kind == TypeKind.NULLABLE
        assert classification.inner is Invoice

    def test_custom_mapping_beats_primitive(self, resolver):
        """Test that custom mappings pre-empt the primitive table."""
        mappings = {int: lambda: Schema(type="string", format="int-as-string")}

        classification = classify(int, resolver, custom_mappings=mappings)

        assert classification.kind == TypeKind.CUSTOM
        assert classification.factory().format == "int-as-string"

    def test_custom_mapping_beats_structure(self, resolver):
        """Test that custom mappings pre-empt object contracts."""
        mappings = {Invoice: lambda: Schema(type="string")}

        assert classify(Invoice, resolver, custom_mappings=mappings).kind == TypeKind.CUSTOM

    def test_configured_transport_type(self, resolver):
        """Test that extra transport types are treated as opaque."""
        classification = classify(Invoice, resolver, transport_types=(Invoice,))

        assert classification.kind == TypeKind.OPAQUE

    def test_object_carries_contract(self, resolver):
        """Test that object classifications expose their members."""
        classification = classify(Invoice, resolver)

        assert [m.name for m in classification.contract.members] == ["number", "total"]
