from __future__ import annotations

import math
from datetime import date, datetime
from enum import Enum
from typing import Any, FrozenSet, NamedTuple, Union

# Union types are written with this exact separator: "number | string"
UNION_SEPARATOR = " | "


# Values are the type strings used on the wire
class ValueType(Enum):
    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"
    ANY = "any"

    def __str__(self) -> str:
        return self.value

    @property
    def members(self) -> FrozenSet['ValueType']:
        return frozenset((self,))

    @staticmethod
    def of(value: Any) -> 'ValueType':
        """Return the tag describing the runtime shape of ``value``."""
        if value is None:
            return ValueType.ANY
        # bool is an int subclass, check it first
        if isinstance(value, bool):
            return ValueType.BOOLEAN
        if isinstance(value, (list, tuple)):
            return ValueType.ARRAY
        if isinstance(value, (int, float)):
            return ValueType.NUMBER
        if isinstance(value, str):
            return ValueType.STRING
        return ValueType.OBJECT


class UnionType(NamedTuple):
    """A two-member union such as ``number | string``."""
    first: ValueType
    second: ValueType

    def __str__(self) -> str:
        return f"{self.first.value}{UNION_SEPARATOR}{self.second.value}"

    @property
    def members(self) -> FrozenSet[ValueType]:
        return frozenset((self.first, self.second))


DataType = Union[ValueType, UnionType]


def parse_type(spec: Union[str, DataType, None]) -> DataType:
    """Parse ``"number"`` or ``"number | string"`` into a DataType."""
    if spec is None:
        return ValueType.ANY
    if isinstance(spec, (ValueType, UnionType)):
        return spec

    if UNION_SEPARATOR in spec:
        parts = [p.strip() for p in spec.split(UNION_SEPARATOR)]
        if len(parts) != 2:
            raise ValueError(f"Union type '{spec}' must have exactly two members")
        return UnionType(ValueType(parts[0]), ValueType(parts[1]))

    return ValueType(spec.strip())


def format_type(data_type: DataType) -> str:
    return str(data_type)


def getValueType(value: Any) -> ValueType:
    return ValueType.of(value)


def isTypeCompatible(value: Any, expected: Union[str, DataType]) -> bool:
    """Check a runtime value against a declared type. ``any`` matches everything."""
    expected = parse_type(expected)
    if expected is ValueType.ANY:
        return True

    actual = ValueType.of(value)
    if isinstance(expected, UnionType):
        return any(member is actual or member is ValueType.ANY for member in expected.members)

    return actual is expected


def areTypesCompatible(source: Union[str, DataType], target: Union[str, DataType]) -> bool:
    """Static edge check between two declared/inferred types."""
    source = parse_type(source)
    target = parse_type(target)

    if ValueType.ANY in source.members or ValueType.ANY in target.members:
        return True

    return bool(source.members & target.members)


# ---------------------------------------------------------------------------
# Coercion helpers used by node contracts. The type system itself never
# coerces; these give the loose equality and truthiness graph authors expect.
# ---------------------------------------------------------------------------

def toNumber(value: Any) -> Union[int, float]:
    """Numeric coercion where anything non-numeric becomes 0."""
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, (int, float)):
        if isinstance(value, float) and math.isnan(value):
            return 0
        return value
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0
        try:
            return int(text)
        except ValueError:
            pass
        try:
            number = float(text)
        except ValueError:
            return 0
        return 0 if math.isnan(number) else number
    if isinstance(value, (list, tuple)) and len(value) == 1:
        return toNumber(value[0])
    return 0


def isTruthy(value: Any) -> bool:
    # empty containers are truthy
    if value is None or value is False:
        return False
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value != 0 and not (isinstance(value, float) and math.isnan(value))
    if isinstance(value, str):
        return value != ""
    return True


def toDisplayString(value: Any) -> str:
    """String form used when matching literals (``true``, ``null``, ``3`` for 3.0)."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    if isinstance(value, (list, tuple)):
        return ",".join("" if v is None else toDisplayString(v) for v in value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return str(value)


def _comparable_number(value: Any) -> float:
    if value is None:
        return math.nan  # a missing value orders against nothing
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        try:
            return float(text)
        except ValueError:
            return math.nan
    return math.nan


def looseEquals(a: Any, b: Any) -> bool:
    if a is None or b is None:
        return a is None and b is None
    if isinstance(a, str) and isinstance(b, str):
        return a == b
    if ValueType.of(a) in (ValueType.ARRAY, ValueType.OBJECT) or ValueType.of(b) in (ValueType.ARRAY, ValueType.OBJECT):
        if ValueType.of(a) is ValueType.of(b):
            return a is b or a == b
        return toDisplayString(a) == toDisplayString(b)
    return _comparable_number(a) == _comparable_number(b)


def strictEquals(a: Any, b: Any) -> bool:
    if ValueType.of(a) is not ValueType.of(b):
        return False
    if isinstance(a, float) and math.isnan(a):
        return False
    return a == b


def compareOrdered(a: Any, b: Any, op: str) -> bool:
    """Relational comparison: strings compare lexically, everything else numerically."""
    if isinstance(a, str) and isinstance(b, str):
        left, right = a, b
    else:
        left, right = _comparable_number(a), _comparable_number(b)
        if math.isnan(left) or math.isnan(right):
            return False

    if op == ">":
        return left > right
    if op == ">=":
        return left >= right
    if op == "<":
        return left < right
    if op == "<=":
        return left <= right
    raise ValueError(f"Not an ordering operator: {op}")
