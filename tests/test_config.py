"""Tests for luastubgen.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from luastubgen.config import ConfigError, GeneratorConfig, load_config


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, GeneratorConfig)
    assert config.root == tmp_path.resolve()
    assert config.assemblies == []
    assert config.output_dir is None
    assert config.resolved_output_dir == tmp_path.resolve() / "output"
    assert config.workers == 4
    assert config.enumerable_style == "function"
    assert config.flatten_inheritance is False
    assert config.templates_dir is None
    assert config.generic_shapes.list_shapes == []
    assert config.generic_shapes.dictionary_shapes == []


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".luastubs.yml"
    config_file.write_text(
        """
output_dir: build/stubs
workers: 2
enumerable_style: table
flatten_inheritance: yes
templates_dir: templates
generic_shapes:
  list: [My.Collections.Vector`1]
  dictionary:
    - My.Collections.Map`2
assemblies:
  - path: dumps/UnityEngine.json
    types: ["UnityEngine.*", "*.Vector3"]
  - path: dumps/Game.yml
""",
        encoding="utf-8",
    )

    config = load_config(config_file)
    root = tmp_path.resolve()

    assert config.root == root
    assert config.output_dir == root / "build/stubs"
    assert config.resolved_output_dir == root / "build/stubs"
    assert config.workers == 2
    assert config.enumerable_style == "table"
    assert config.flatten_inheritance is True
    assert config.templates_dir == root / "templates"
    assert config.generic_shapes.list_shapes == ["My.Collections.Vector`1"]
    assert config.generic_shapes.dictionary_shapes == ["My.Collections.Map`2"]
    assert [assembly.path for assembly in config.assemblies] == [
        root / "dumps/UnityEngine.json",
        root / "dumps/Game.yml",
    ]
    assert config.assemblies[0].types == ["UnityEngine.*", "*.Vector3"]
    assert config.assemblies[1].types == ["*"]


def test_directory_argument_resolves_config_file(tmp_path: Path) -> None:
    (tmp_path / ".luastubs.yml").write_text("workers: 8\n", encoding="utf-8")
    assert load_config(tmp_path).workers == 8


def test_empty_config_file_yields_defaults(tmp_path: Path) -> None:
    (tmp_path / ".luastubs.yml").write_text("\n", encoding="utf-8")
    assert load_config(tmp_path).assemblies == []


@pytest.mark.parametrize(
    ("content", "message"),
    [
        ("- just\n- a list\n", "mapping at the root"),
        ("assemblies: dumps/Game.json\n", "'assemblies' must be a list"),
        ("assemblies:\n  - types: ['*']\n", "assemblies[0] is missing 'path'"),
        ("workers: 0\n", "'workers' must be a positive integer"),
        ("enumerable_style: coroutine\n", "'enumerable_style' must be one of"),
        ("workers: [1\n", "Failed to parse"),
    ],
)
def test_invalid_config_raises(tmp_path: Path, content: str, message: str) -> None:
    (tmp_path / ".luastubs.yml").write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError) as excinfo:
        load_config(tmp_path)

    assert message in str(excinfo.value)
