"""Static tables shared by the name resolver, mapper and renderers."""

from __future__ import annotations

OPAQUE_TOKEN = "userdata"
VOID = ""
ROOT_TABLE = "CS"
NO_NAMESPACE = "-"
OBJECT_TYPE_NAME = "System.Object"

# see: https://github.com/Tencent/xLua/blob/master/Assets/XLua/Doc/XLua_API.md (type mapping)
PRIMITIVE_TOKENS: dict[str, str] = {
    "System.Object": OPAQUE_TOKEN,
    "System.Boolean": "boolean",
    "System.SByte": "integer",
    "System.Int16": "integer",
    "System.Int32": "integer",
    "System.Int64": "integer",
    "System.Byte": "integer",
    "System.UInt16": "integer",
    "System.UInt32": "integer",
    "System.UInt64": "integer",
    "System.IntPtr": "integer",
    "System.UIntPtr": "integer",
    "System.Single": "number",
    "System.Double": "number",
    "System.Decimal": "number",
    "System.Char": "string",
    "System.String": "string",
}

LUA_KEYWORDS: frozenset[str] = frozenset(
    {
        "and",
        "break",
        "do",
        "else",
        "elseif",
        "end",
        "false",
        "for",
        "function",
        "goto",
        "if",
        "in",
        "local",
        "nil",
        "not",
        "or",
        "repeat",
        "return",
        "then",
        "true",
        "until",
        "while",
    }
)

KEYWORD_ESCAPE = "__{name}__"

LIST_SHAPES: tuple[str, ...] = (
    "System.Collections.Generic.List`1",
    "System.Collections.Generic.IList`1",
    "System.Collections.Generic.IReadOnlyList`1",
)

DICTIONARY_SHAPES: tuple[str, ...] = (
    "System.Collections.Generic.Dictionary`2",
    "System.Collections.Generic.IDictionary`2",
    "System.Collections.Generic.IReadOnlyDictionary`2",
)

ENUMERABLE_SHAPES: tuple[str, ...] = ("System.Collections.Generic.IEnumerable`1",)
ENUMERATOR_SHAPES: tuple[str, ...] = ("System.Collections.Generic.IEnumerator`1",)

AWAITABLE_SHAPES: tuple[str, ...] = (
    "System.Threading.Tasks.Task",
    "System.Threading.Tasks.Task`1",
    "System.Threading.Tasks.ValueTask",
    "System.Threading.Tasks.ValueTask`1",
)

NULLABLE_SHAPE = "System.Nullable`1"

DELEGATE_ROOTS: tuple[str, ...] = ("System.Delegate", "System.MulticastDelegate")

OPERATOR_NAMES: dict[str, tuple[str, bool]] = {
    "op_Addition": ("add", True),
    "op_Subtraction": ("sub", True),
    "op_Multiply": ("mul", True),
    "op_Division": ("div", True),
    "op_UnaryNegation": ("unm", False),
}

ENUMERABLE_STYLES: tuple[str, ...] = ("function", "table")


__all__ = [
    "AWAITABLE_SHAPES",
    "DELEGATE_ROOTS",
    "DICTIONARY_SHAPES",
    "ENUMERABLE_SHAPES",
    "ENUMERABLE_STYLES",
    "ENUMERATOR_SHAPES",
    "KEYWORD_ESCAPE",
    "LIST_SHAPES",
    "LUA_KEYWORDS",
    "NO_NAMESPACE",
    "NULLABLE_SHAPE",
    "OBJECT_TYPE_NAME",
    "OPAQUE_TOKEN",
    "OPERATOR_NAMES",
    "PRIMITIVE_TOKENS",
    "ROOT_TABLE",
    "VOID",
]
