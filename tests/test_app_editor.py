"""Tests for the demo app-editor tools and the user-input tool."""

import io
import json
from pathlib import Path

import pytest

from thinkloop.agent import execute_tool
from thinkloop.agent.tool_executor import ToolExecutionError
from thinkloop.core.context import RunContext
from thinkloop.llms.testing import FakeLLM
from thinkloop.tools import (
    ToolInputError,
    ToolRegistry,
)
from thinkloop.tools.app_editor import (
    AppTable,
    AppTemplate,
    build_app_editor_tools,
)
from thinkloop.tools.user_input import (
    read_line,
    user_input_tool,
)

YES = '{"result": true}'
NO = '{"result": false}'


def build_registry(verdict: str, replies: str, app: AppTemplate) -> ToolRegistry:
    tools = build_app_editor_tools(
        FakeLLM(always_text=verdict),
        template=app,
        reader=io.StringIO(replies),
        writer=io.StringIO(),
    )
    return ToolRegistry(tools)


def test_tool_names() -> None:
    registry = build_registry(YES, "", AppTemplate())
    assert registry.names() == [
        "user-input",
        "list-tables",
        "add-table",
        "remove-table",
        "save-app-template",
    ]


def test_add_list_remove(tmp_path: Path) -> None:
    app = AppTemplate()
    registry = build_registry(YES, "yes\nsure\nyes\n", app)
    ctx = RunContext()

    assert execute_tool(registry, ctx, "add-table", "employees") == "Table employees added"
    assert execute_tool(registry, ctx, "add-table", "offices") == "Table offices added"
    assert execute_tool(registry, ctx, "list-tables", "") == "employees,offices"
    assert execute_tool(registry, ctx, "remove-table", "offices") == "Table offices removed"
    assert [t.name for t in app.tables] == ["employees"]

    target = tmp_path / "app.json"
    assert execute_tool(registry, ctx, "save-app-template", str(target)) == (
        "successfully wrote AppTemplate"
    )
    saved = json.loads(target.read_text(encoding="utf-8"))
    assert saved == {"tables": [{"name": "employees", "columns": []}]}


def test_user_declines() -> None:
    app = AppTemplate()
    registry = build_registry(NO, "no\n", app)

    with pytest.raises(ToolExecutionError, match="user changed their mind"):
        execute_tool(registry, RunContext(), "add-table", "employees")
    assert app.tables == []


def test_user_wants_something_else() -> None:
    registry = build_registry('{"error": "user wants to add a column"}', "add a column\n", AppTemplate())

    with pytest.raises(ToolExecutionError, match="user wants to add a column"):
        execute_tool(registry, RunContext(), "add-table", "employees")


def test_remove_missing_table() -> None:
    app = AppTemplate(tables=[AppTable(name="employees")])
    registry = build_registry(YES, "yes\n", app)

    with pytest.raises(ToolExecutionError, match="Table offices not found"):
        execute_tool(registry, RunContext(), "remove-table", "offices")
    assert len(app.tables) == 1


def test_table_name_must_be_one_word() -> None:
    registry = build_registry(YES, "", AppTemplate())
    t = registry.lookup("add-table")
    assert t is not None

    with pytest.raises(ToolInputError, match="should only get one input"):
        t.run(RunContext(), "two words")


def test_user_input_tool() -> None:
    writer = io.StringIO()
    t = user_input_tool(io.StringIO("employees\n"), writer)

    assert t.name == "user-input"
    assert t.run(RunContext(), "What should the table be named?") == "employees"
    assert "AI: What should the table be named?" in writer.getvalue()


def test_read_line_end_of_input() -> None:
    with pytest.raises(EOFError, match="unable to get input from user"):
        read_line(io.StringIO(""))
