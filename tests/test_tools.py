"""Tests for tool-name normalization and the tool registry."""

import pytest

from thinkloop.core.context import RunContext
from thinkloop.tools import (
    Tool,
    ToolConfigError,
    ToolRegistry,
    normalize_tool_name,
    tool,
)


def build_fake_tool(name: str, description: str = "some-description") -> Tool:
    return Tool(
        name=name,
        description=description,
        args=["arg"],
        run=lambda ctx, tool_input: f"running tool {name}: {tool_input}",
    )


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("foo-tool", "foo-tool"),
        ("Foo_ TOOL", "foo-tool"),
        ("foo__tool", "foo-tool"),
        ("user input", "user-input"),
        ("List\tTables", "list-tables"),
    ],
)
def test_normalize_tool_name(raw: str, expected: str) -> None:
    """Case and whitespace/underscore runs are collapsed."""

    assert normalize_tool_name(raw) == expected


def test_normalize_tool_name_is_idempotent() -> None:
    """Normalizing a normalized name changes nothing."""

    once = normalize_tool_name("Some_ Weird   NAME")
    assert normalize_tool_name(once) == once


def test_registry_lookup_and_order() -> None:
    """The registry keeps registration order and normalizes names."""

    registry = ToolRegistry([build_fake_tool("foo_TOOL"), build_fake_tool("Bar")])

    assert registry.names() == ["foo-tool", "bar"]
    assert [t.name for t in registry.all()] == ["foo-tool", "bar"]
    assert len(registry) == 2
    assert registry.lookup("foo-tool") is registry.all()[0]
    assert registry.lookup("FOO tool") is registry.all()[0]
    assert registry.lookup("baz") is None
    assert "bar" in registry
    assert "baz" not in registry


def test_registry_keeps_run_callable() -> None:
    """Normalized copies still call the original function."""

    registry = ToolRegistry([build_fake_tool("foo_TOOL")])

    t = registry.lookup("foo-tool")
    assert t is not None
    assert t.run(RunContext(), "x") == "running tool foo_TOOL: x"


@pytest.mark.parametrize(
    "tools, message",
    [
        ([], "no tools provided"),
        ([build_fake_tool("")], "tool name is empty"),
        ([build_fake_tool("foo", description="")], "tool description is empty"),
        ([build_fake_tool("foo"), build_fake_tool("foo")], "multiple tools"),
        ([build_fake_tool("Foo_Tool"), build_fake_tool("foo tool")], "'foo-tool'"),
    ],
)
def test_registry_rejects_bad_tool_sets(tools: list, message: str) -> None:
    """Malformed tool sets fail at construction."""

    with pytest.raises(ToolConfigError, match=message):
        ToolRegistry(tools)


def test_tool_decorator_uses_docstring() -> None:
    """The decorator builds a Tool from a function and its docstring."""

    @tool("add table", examples=["employees"], args=["table name"])
    def add_table(ctx: RunContext, tool_input: str) -> str:
        """Add a table within the app."""
        return tool_input

    assert isinstance(add_table, Tool)
    assert add_table.name == "add table"
    assert add_table.description == "Add a table within the app."
    assert add_table.examples == ["employees"]
    assert add_table.args == ["table name"]
    assert add_table.run(RunContext(), "t") == "t"


def test_tool_serialization_excludes_run() -> None:
    """The callable never leaks into serialized tool descriptors."""

    dumped = build_fake_tool("foo").model_dump()
    assert "run" not in dumped
    assert dumped["name"] == "foo"
