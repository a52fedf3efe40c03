from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Union
from typing_extensions import TypeAlias, TypeGuard

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

# ---------- Value Model ----------

@dataclass
class LNumber:
    value: int
    def __repr__(self) -> str:
        return str(self.value)

@dataclass
class LError:
    message: str
    def __repr__(self) -> str:
        return f"Error: {self.message}"

@dataclass
class LSymbol:
    name: str
    def __repr__(self) -> str:
        return self.name

@dataclass
class LSExpr:
    cells: List['Value'] = field(default_factory=list)
    def __repr__(self) -> str:
        return "(" + " ".join(repr(x) for x in self.cells) + ")"

@dataclass
class LQExpr:
    cells: List['Value'] = field(default_factory=list)
    def __repr__(self) -> str:
        return "{" + " ".join(repr(x) for x in self.cells) + "}"

BuiltinFn = Callable[['Environment', LSExpr], 'Value']

@dataclass(frozen=True)
class LBuiltin:
    name: str
    fn: BuiltinFn
    def __repr__(self) -> str:
        return "<builtin>"

@dataclass
class LLambda:
    formals: LQExpr
    body: LQExpr
    env: 'Environment'
    def __repr__(self) -> str:
        return f"(\\ {self.formals!r} {self.body!r})"

Value: TypeAlias = Union[LNumber, LError, LSymbol, LSExpr, LQExpr, LBuiltin, LLambda]
ListValue: TypeAlias = Union[LSExpr, LQExpr]

_TYPE_NAMES: Dict[type, str] = {
    LNumber: "Number",
    LError: "Error",
    LSymbol: "Symbol",
    LSExpr: "S-Expression",
    LQExpr: "Q-Expression",
    LBuiltin: "Function",
    LLambda: "Function",
}

def type_name(value: Value) -> str:
    return _TYPE_NAMES.get(type(value), "Unknown")

def is_function(value: Value) -> TypeGuard[Union[LBuiltin, LLambda]]:
    return isinstance(value, (LBuiltin, LLambda))

# ---------- Exceptions ----------

class LispyError(Exception):
    pass

class LispyIndexError(LispyError):
    def __init__(self, index: int, count: int):
        super().__init__(f"Index {index} out of bounds for list of {count} cells")
        self.index = index
        self.count = count

class ParseError(LispyError):
    """Parse error with position info"""
    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(
            f"{message} at line {line}, col {column}" if line is not None else message
        )

# ---------- List operations ----------

def pop(lst: ListValue, index: int) -> Value:
    """Remove and return the cell at *index*, shifting the rest left."""
    if not 0 <= index < len(lst.cells):
        raise LispyIndexError(index, len(lst.cells))

    return lst.cells.pop(index)

def take(lst: ListValue, index: int) -> Value:
    """Pop the cell at *index* and discard the remainder of *lst*."""
    x = pop(lst, index)
    lst.cells.clear()

    return x

def join(a: ListValue, b: ListValue) -> ListValue:
    while b.cells:
        a.cells.append(pop(b, 0))

    return a

def copy_value(value: Value) -> Value:
    match value:
        case LNumber(value=n):
            return LNumber(n)
        case LError(message=msg):
            return LError(msg)
        case LSymbol(name=name):
            return LSymbol(name)
        case LSExpr(cells=cells):
            return LSExpr([copy_value(c) for c in cells])
        case LQExpr(cells=cells):
            return LQExpr([copy_value(c) for c in cells])
        case LBuiltin():
            return value
        case LLambda(formals=formals, body=body, env=env):
            return LLambda(
                formals=LQExpr([copy_value(c) for c in formals.cells]),
                body=LQExpr([copy_value(c) for c in body.cells]),
                env=env.copy(),
            )
        case _:
            raise LispyError(f"Unexpected value type {type(value).__name__}")

def values_equal(lhs: Value, rhs: Value) -> bool:
    match (lhs, rhs):
        case (LNumber(value=a), LNumber(value=b)):
            return a == b
        case (LError(message=a), LError(message=b)):
            return a == b
        case (LSymbol(name=a), LSymbol(name=b)):
            return a == b
        case (LSExpr(cells=a), LSExpr(cells=b)) | (LQExpr(cells=a), LQExpr(cells=b)):
            return len(a) == len(b) and all(
                values_equal(x, y) for x, y in zip(a, b)
            )
        case (LBuiltin(), LBuiltin()):
            return lhs.fn is rhs.fn
        case (LLambda(), LLambda()):
            return values_equal(lhs.formals, rhs.formals) and values_equal(lhs.body, rhs.body)
        case _:
            return False

# ---------- Environment ----------

class Environment:
    def __init__(self, parent: Optional['Environment']=None):
        self.parent = parent
        self.vars: Dict[str, Value] = {}

        if parent is None and Builtins.functions:
            for name, builtin in Builtins.functions.items():
                self.vars[name] = builtin

    def get(self, name: str) -> Value:
        if name in self.vars:
            return copy_value(self.vars[name])

        if self.parent is not None:
            return self.parent.get(name)

        return LError(f"Unbound symbol: '{name}'")

    def put(self, name: str, val: Value) -> None:
        self.vars[name] = copy_value(val)

    def define(self, name: str, val: Value) -> None:
        env = self

        while env.parent is not None:
            env = env.parent
        env.put(name, val)

    def copy(self) -> 'Environment':
        dup = Environment.__new__(Environment)
        dup.parent = self.parent
        dup.vars = {name: copy_value(val) for name, val in self.vars.items()}

        return dup

    def names(self) -> List[str]:
        return sorted(self.vars)

class Builtins:
    functions: Dict[str, LBuiltin] = {}
