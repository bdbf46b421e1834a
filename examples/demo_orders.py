#!/usr/bin/env python3
"""
Demo: Order graph with mutual and self references.

This demonstrates registering a small shop domain with:
- Mutual references: Order <-> OrderItem
- Self reference: Category.parent
- Enum member: Order.status
- Validation constraints from pydantic Field(...)
- A vendor extension filter and a custom type mapping
"""

import enum
import json
import sys
from decimal import Decimal
from pathlib import Path
from typing import Dict, List, Optional

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from pydantic import BaseModel, Field

from typeschema import Schema, SchemaConfig, generate_document
from typeschema.registry import DocstringDescriptionFilter, VendorExtensionFilter


class Status(enum.Enum):
    PENDING = "pending"
    SHIPPED = "shipped"
    DELIVERED = "delivered"


class Category(BaseModel):
    """Product category; categories nest."""

    name: str = Field(min_length=1, max_length=40)
    parent: Optional["Category"] = None


class OrderItem(BaseModel):
    """One line of an order."""

    sku: str = Field(pattern=r"^[A-Z0-9-]+$")
    quantity: int = Field(ge=1)
    price: Decimal
    category: Optional[Category] = None
    order: Optional["Order"] = None


class Order(BaseModel):
    """A customer order."""

    id: int
    status: Status
    items: List[OrderItem]
    metadata: Dict[str, str] = {}


OrderItem.model_rebuild()


def main():
    print("=" * 60)
    print("typeschema Demo: Order Graph")
    print("=" * 60)

    config = SchemaConfig.customize(lambda c: (
        c.map_type(Decimal, Schema(type="string", format="decimal"))
         .schema_filter(DocstringDescriptionFilter())
         .schema_filter(VendorExtensionFilter("x-domain", "shop"))
    ))

    document = generate_document([Order, List[Category]], config=config)

    print("\nRoot schemas:")
    print(json.dumps(document.to_dict()["schemas"], indent=2))

    print("\nDefinitions:")
    print(json.dumps(document.definitions.to_dict(), indent=2))

    print("\n" + "=" * 60)
    print(f"Registered {len(document.definitions)} definitions: {', '.join(document.definitions)}")
    print("=" * 60)


if __name__ == "__main__":
    main()
