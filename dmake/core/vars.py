# SPDX-License-Identifier: MIT
"""Variables and interpolation for .dmake files.

Every value is a string. A Variable pairs a value with the assignment
operator it was written with, and a VariableStore applies those
operators and expands references to earlier variables.

Supported syntax:
- Simple references: $VAR (the name runs up to the next whitespace)
- Braced references: ${VAR} (the name runs up to the next '}')
- Escaped dollars: $$ becomes a literal $

Undefined variables expand to the empty string.
"""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum


class Op(Enum):
    """Assignment operators."""

    ASSIGN = "="
    APPEND = "+="
    SUBTRACT = "-="

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Variable:
    """The right-hand side of one .dmake line."""

    op: Op
    value: str

    @classmethod
    def assign(cls, value: str) -> Variable:
        return cls(Op.ASSIGN, value)


# Match: $$, ${var}, $var
_TOKEN_PATTERN = re.compile(
    r"(\$\$)"  # Group 1: Escaped dollar
    r"|"
    r"\$\{([^}]*)\}"  # Group 2: Braced ${var}
    r"|"
    r"\$(\S+)"  # Group 3: Simple $var
)


class VariableStore:
    """Mapping from variable name to Variable.

    Example:
        store = VariableStore()
        store.set_value("NAME", "fred")
        store.apply("NAME", Variable(Op.APPEND, "-2"))
        store.interpolate("lib${NAME}.a")  # "libfred-2.a"
    """

    def __init__(self, values: dict[str, str] | None = None) -> None:
        self._vars: dict[str, Variable] = {}
        if values:
            for name, value in values.items():
                self.set_value(name, value)

    def set(self, name: str, var: Variable) -> None:
        self._vars[name] = var

    def get(self, name: str) -> Variable | None:
        return self._vars.get(name)

    def set_value(self, name: str, value: str) -> None:
        self._vars[name] = Variable.assign(value)

    def get_value(self, name: str) -> str | None:
        """Return the string value of a variable, or None if undefined."""
        var = self._vars.get(name)
        return var.value if var is not None else None

    def get_string(self, name: str) -> str:
        """Return the string value of a variable, "" if undefined."""
        return self.get_value(name) or ""

    def apply(self, name: str, var: Variable) -> None:
        """Apply an assignment to the store.

        ASSIGN replaces any existing value. APPEND concatenates onto the
        existing value and SUBTRACT removes every occurrence of the new
        value from it; both act as ASSIGN when the name is undefined.

        Raises:
            ValueError: If var carries an unknown operator.
        """
        existing = self._vars.get(name)
        if var.op is Op.ASSIGN or (
            existing is None and var.op in (Op.APPEND, Op.SUBTRACT)
        ):
            self._vars[name] = Variable.assign(var.value)
        elif var.op is Op.APPEND:
            self._vars[name] = Variable.assign(existing.value + var.value)
        elif var.op is Op.SUBTRACT:
            self._vars[name] = Variable.assign(existing.value.replace(var.value, ""))
        else:
            raise ValueError(f"unknown assignment operator: {var.op!r}")

    def interpolate(self, text: str) -> str:
        """Expand variable references in text against the current values."""

        def replace_match(match: re.Match[str]) -> str:
            if match.group(1):  # $$
                return "$"
            name = match.group(2) if match.group(2) is not None else match.group(3)
            return self.get_string(name)

        return _TOKEN_PATTERN.sub(replace_match, text)

    def __contains__(self, name: object) -> bool:
        return name in self._vars

    def __iter__(self) -> Iterator[str]:
        return iter(self._vars)

    def __len__(self) -> int:
        return len(self._vars)

    def __repr__(self) -> str:
        items = ", ".join(f"{k}={v.value!r}" for k, v in self._vars.items())
        return f"VariableStore({items})"
