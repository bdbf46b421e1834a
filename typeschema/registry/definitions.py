"""
Definitions table - named, fully expanded schemas.

Keys compare case-insensitively ("Order" and "order" are the same
definition) while the first-seen spelling is kept for iteration and output.
The first writer for a name wins; later writes through add() are no-ops,
which is what terminates cycles and skips duplicate work on diamond-shaped
type graphs.
"""

from typing import Dict, Iterator, MutableMapping, Tuple

from typeschema.schema.types import Schema


class DefinitionsTable(MutableMapping[str, Schema]):
    """
    Case-insensitive, insertion-ordered mapping of definition name to Schema.

    Example:
        ```python
        table = DefinitionsTable()
        table.add("Order", order_schema)      # True
        table.add("ORDER", other_schema)      # False, first writer wins
        "order" in table                      # True
        list(table)                           # ["Order"]
        ```
    """

    def __init__(self) -> None:
        self._entries: Dict[str, Tuple[str, Schema]] = {}

    @staticmethod
    def _key(name: str) -> str:
        return name.casefold()

    def add(self, name: str, schema: Schema) -> bool:
        """
        Insert a definition unless the name is already taken.

        Returns:
            bool: True if inserted, False if an entry already existed
        """
        key = self._key(name)
        if key in self._entries:
            return False
        self._entries[key] = (name, schema)
        return True

    def __getitem__(self, name: str) -> Schema:
        return self._entries[self._key(name)][1]

    def __setitem__(self, name: str, schema: Schema) -> None:
        key = self._key(name)
        original = self._entries[key][0] if key in self._entries else name
        self._entries[key] = (original, schema)

    def __delitem__(self, name: str) -> None:
        del self._entries[self._key(name)]

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self._key(name) in self._entries

    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self._entries.values())

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"DefinitionsTable({list(self)!r})"

    def to_dict(self) -> Dict[str, dict]:
        """Render every definition to its wire form."""
        return {name: schema.to_dict() for name, schema in self.items()}
