"""
Contract resolution module.

Answers structural questions about types on behalf of the registry: is a type
array-like, map-like or object-like, and which members does it have.

Components:
    - resolver: Default ContractResolver and the contract/member dataclasses
    - naming: Deterministic definition names (friendly_id)
"""

from typeschema.contracts.naming import friendly_id
from typeschema.contracts.resolver import (
    ArrayContract,
    Contract,
    ContractResolver,
    DictionaryContract,
    Member,
    ObjectContract,
)

__all__ = [
    "ArrayContract",
    "Contract",
    "ContractResolver",
    "DictionaryContract",
    "Member",
    "ObjectContract",
    "friendly_id",
]
