"""Namespaced identifiers shared by store keys and user locator ids."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

EMPLOYEE_ID_TYPE: Final = "employeeid"
SEPARATOR: Final = ":"


@dataclass(frozen=True, slots=True)
class Identifier:
    """``domain:type:value`` triple; equality follows the serialized form."""

    domain: str
    type: str
    value: str

    def serialize(self) -> str:
        return SEPARATOR.join((self.domain, self.type, self.value))

    def __str__(self) -> str:
        return self.serialize()
