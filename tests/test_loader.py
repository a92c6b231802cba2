"""Tests for descriptor dump loading."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict

import pytest

from luastubgen.loader import DescriptorError, load_descriptor_dump, parse_descriptor_dump
from luastubgen.mapping import QualifiedNameResolver
from luastubgen.models import Access, TypeKind
from luastubgen.orchestrator import GenerationContext

GAME_DUMP: Dict[str, Any] = {
    "assembly": "Game",
    "types": [
        {
            "id": "Game.Player",
            "base_type": "Game.Entity",
            "interfaces": ["System.IDisposable"],
            "fields": [{"name": "health", "type": "System.Int32", "access": "public"}],
            "properties": [
                {
                    "name": "Item",
                    "type": "System.String",
                    "access": "public",
                    "index_parameters": [{"name": "i", "type": "System.Int32"}],
                },
                {"name": "Name", "type": "System.String", "access": "family", "overrides": True},
            ],
            "methods": [
                {
                    "name": "Move",
                    "parameters": [
                        {"name": "dir", "type": "Game.Direction"},
                        {"name": "speed", "type": "System.Single", "optional": True},
                    ],
                    "return_type": "System.Void",
                    "access": "public",
                },
                {
                    "name": "Find",
                    "access": "internal",
                    "generic_arguments": ["Game.Player!!T"],
                    "parameters": [{"name": "arg", "type": "Game.Player!!T"}],
                    "return_type": "Game.Player!!T",
                },
            ],
            "constructors": [{"parameters": [{"name": "name", "type": "System.String"}]}],
        },
        {"id": "Game.Entity"},
        {
            "id": "Game.Direction",
            "kind": "enum",
            "enum_values": [{"name": "Up", "value": 0}, {"name": "Down", "value": 1}],
        },
        {
            "id": "Game.Player!!T",
            "kind": "generic_parameter",
            "name": "T",
            "namespace": None,
            "generic_parameter": {"method": True, "reference_type": True},
        },
        {"id": "Game.Player+Stats", "declaring_type": "Game.Player"},
        {
            "id": "Game.Callback",
            "kind": "delegate",
            "base_type": "System.MulticastDelegate",
            "invoke": {"parameters": [{"name": "items", "type": "System.Int32[]", "variadic": True}]},
        },
    ],
}


def _by_id(dump):
    return {type_.identity: type_ for type_ in dump.types}


def test_load_json_dump_links_references(tmp_path: Path) -> None:
    path = tmp_path / "Game.json"
    path.write_text(json.dumps(GAME_DUMP), encoding="utf-8")

    dump = load_descriptor_dump(path)
    types = _by_id(dump)
    player = types["Game.Player"]

    assert dump.name == "Game"
    assert dump.source == str(path)
    assert [type_.identity for type_ in dump.types] == [entry["id"] for entry in GAME_DUMP["types"]]
    assert player.base_type is types["Game.Entity"]
    assert player.namespace == "Game"
    assert player.name == "Player"
    assert player.methods[0].parameters[0].type is types["Game.Direction"]
    assert player.methods[0].parameters[1].is_optional is True
    assert player.methods[0].return_type.is_void
    assert player.methods[1].access is Access.PACKAGE
    assert player.methods[1].generic_arguments == [types["Game.Player!!T"]]
    assert player.properties[0].index_parameters[0].name == "i"
    assert player.properties[1].access is Access.PROTECTED
    assert player.properties[1].hides_base is True
    assert player.constructors[0].name == ".ctor"


def test_external_references_are_parsed_from_identity(tmp_path: Path) -> None:
    path = tmp_path / "Game.json"
    path.write_text(json.dumps(GAME_DUMP), encoding="utf-8")

    types = _by_id(load_descriptor_dump(path))
    disposable = types["Game.Player"].interfaces[0]
    callback_param = types["Game.Callback"].invoke.parameters[0]

    assert disposable.is_external
    assert (disposable.namespace, disposable.name) == ("System", "IDisposable")
    assert callback_param.type.kind is TypeKind.ARRAY
    assert callback_param.type.element_type.identity == "System.Int32"
    assert callback_param.is_variadic is True


def test_generic_parameter_and_enum_entries(tmp_path: Path) -> None:
    path = tmp_path / "Game.json"
    path.write_text(json.dumps(GAME_DUMP), encoding="utf-8")

    types = _by_id(load_descriptor_dump(path))
    t = types["Game.Player!!T"]
    direction = types["Game.Direction"]

    assert t.is_generic_method_parameter
    assert t.has_reference_type_constraint
    assert t.namespace is None
    assert [(value.name, value.value) for value in direction.enum_values] == [("Up", 0), ("Down", 1)]


def test_nested_types_resolve_through_declaring_chain(tmp_path: Path) -> None:
    path = tmp_path / "Game.json"
    path.write_text(json.dumps(GAME_DUMP), encoding="utf-8")

    types = _by_id(load_descriptor_dump(path))

    assert QualifiedNameResolver().resolve(types["Game.Player+Stats"]) == "Game.Player.Stats"


def test_external_nested_and_generic_identities() -> None:
    dump = parse_descriptor_dump(
        {
            "types": [
                {
                    "id": "Game.Holder",
                    "fields": [
                        {"name": "inner", "type": "Lib.Outer+Inner"},
                        {"name": "values", "type": "System.Collections.Generic.List`1[[System.Int32]]"},
                        {"name": "ref", "type": "System.Int32&"},
                    ],
                }
            ]
        }
    )
    inner, values, by_ref = (field.type for field in dump.types[0].fields)

    assert QualifiedNameResolver().resolve(inner) == "Lib.Outer.Inner"
    assert inner.declaring_type.identity == "Lib.Outer"
    assert values.is_generic
    assert (values.namespace, values.name) == ("System.Collections.Generic", "List`1")
    assert by_ref.kind is TypeKind.BYREF
    assert dump.name == "Assembly"


def test_external_instantiations_and_arrays_map_structurally() -> None:
    dump = parse_descriptor_dump(
        {
            "types": [
                {
                    "id": "Game.Holder",
                    "fields": [
                        {"name": "scores", "type": "System.Collections.Generic.List`1[[System.Int32]]"},
                        {"name": "level", "type": "System.Nullable`1[[System.Int32, mscorlib, Version=4.0.0.0]]"},
                        {
                            "name": "lookup",
                            "type": "System.Collections.Generic.Dictionary`2[[System.String],[System.Single]]",
                        },
                        {"name": "grid", "type": "System.Int32[,]"},
                        {"name": "rows", "type": "System.Collections.Generic.List`1[[System.String]][]"},
                        {"name": "plain", "type": "Game.Pool`1[Game.Holder]"},
                    ],
                }
            ]
        }
    )
    holder = dump.types[0]
    scores, level, lookup, grid, rows, plain = (field.type for field in holder.fields)
    context = GenerationContext()

    assert scores.generic_definition.identity == "System.Collections.Generic.List`1"
    assert [argument.identity for argument in level.generic_arguments] == ["System.Int32"]
    assert grid.kind is TypeKind.ARRAY
    assert grid.element_type.identity == "System.Int32"
    assert rows.element_type is not None and rows.element_type.generic_definition is scores.generic_definition
    assert plain.generic_arguments == [holder]

    mapped = [context.mapper.map_type(type_) for type_ in (scores, level, lookup, grid, rows)]
    assert mapped == ["integer[]", "integer|nil", "{ [string]: number }", "integer[]", "string[][]"]
    assert "---@field scores integer[]\n" in context.translate(holder).text


@pytest.mark.parametrize(
    ("entries", "reason"),
    [
        (
            [
                {"id": "A.X", "declaring_type": "A.Y"},
                {"id": "A.Y", "declaring_type": "A.X"},
            ],
            "cyclic declaring type",
        ),
        ([{"id": "A.X", "declaring_type": "A.X"}], "cyclic declaring type"),
        (
            [
                {"id": "A.X", "base_type": "A.Y"},
                {"id": "A.Y", "base_type": "A.X"},
            ],
            "cyclic base type",
        ),
    ],
)
def test_reference_cycles_raise_descriptor_error(entries: list, reason: str) -> None:
    with pytest.raises(DescriptorError) as excinfo:
        parse_descriptor_dump({"types": entries})

    assert excinfo.value.identity == "A.X"
    assert excinfo.value.reason == reason


def test_load_yaml_dump(tmp_path: Path) -> None:
    path = tmp_path / "UI.yml"
    path.write_text(
        """
types:
  - id: UI.Window
    properties:
      - name: Title
        type: System.String
        access: public
  - id: UI.Mode
    kind: enum
    enum_values:
      Hidden: 0
      Shown: 1
""",
        encoding="utf-8",
    )

    dump = load_descriptor_dump(path)
    window, mode = dump.types

    assert dump.name == "UI"
    assert window.properties[0].type.identity == "System.String"
    assert [(value.name, value.value) for value in mode.enum_values] == [("Hidden", 0), ("Shown", 1)]


@pytest.mark.parametrize(
    ("entries", "identity", "message"),
    [
        ([{"name": "Nameless"}], None, "missing 'id'"),
        ([{"id": "A"}, {"id": "A"}], "A", "duplicate type identity"),
        ([{"id": "A", "kind": "record"}], "A", "unknown kind"),
        ([{"id": "A", "fields": [{"name": "x", "type": "B", "access": "friend"}]}], "A", "unknown access"),
        ([{"id": "A", "fields": [{"name": "x"}]}], "A", "missing field type"),
        ([{"id": "A", "kind": "enum", "enum_values": [{"name": "X", "value": "1"}]}], "A", "must be an integer"),
        ([{"id": "A", "methods": {"name": "Run"}}], "A", "'methods' must be a list"),
        (["A"], None, "must be a mapping"),
    ],
)
def test_malformed_entries_raise_descriptor_error(entries: list, identity: str | None, message: str) -> None:
    with pytest.raises(DescriptorError) as excinfo:
        parse_descriptor_dump({"types": entries})

    assert excinfo.value.identity == identity
    assert message in str(excinfo.value)


def test_unparseable_file_raises_descriptor_error(tmp_path: Path) -> None:
    broken = tmp_path / "Broken.json"
    broken.write_text("{not json", encoding="utf-8")
    listing = tmp_path / "List.yaml"
    listing.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(DescriptorError, match="Failed to parse Broken.json"):
        load_descriptor_dump(broken)
    with pytest.raises(DescriptorError, match="mapping at the root"):
        load_descriptor_dump(listing)
