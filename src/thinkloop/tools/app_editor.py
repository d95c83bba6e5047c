"""
Demo tool set: edit an in-memory app template (tables and columns) and save it as JSON.

Adding and removing tables asks the user for confirmation first; the reply is judged by the LLM via
:func:`thinkloop.chains.confirmation.confirmation_chain`.
"""

import logging
import sys
from pathlib import Path
from typing import (
    Any,
    List,
    Optional,
    TextIO,
)

from pydantic import (
    BaseModel,
    Field,
)

from thinkloop.chains import Chain
from thinkloop.chains.confirmation import confirmation_chain
from thinkloop.core.context import RunContext
from thinkloop.llms import LLM
from thinkloop.tools import (
    Tool,
    ToolInputError,
    tool,
)
from thinkloop.tools.user_input import user_input_tool

logger = logging.getLogger(__name__)


class AppColumn(BaseModel):
    name: str
    type: str


class AppTable(BaseModel):
    name: str
    columns: List[AppColumn] = Field(default_factory=list)


class AppTemplate(BaseModel):
    """The app being edited."""

    tables: List[AppTable] = Field(default_factory=list)


def _single_arg(tool_input: str) -> str:
    parts = tool_input.split()
    if len(parts) != 1:
        raise ToolInputError("invalid tool input: should only get one input")
    return parts[0]


def _confirm(ctx: RunContext, chain: Chain, message: str) -> None:
    """Raise unless the user confirms *message*."""
    confirm = chain.run(ctx, message)
    if confirm.error:
        raise RuntimeError(confirm.error)
    if not confirm.result:
        raise RuntimeError("user changed their mind")


def build_app_editor_tools(
    llm: LLM,
    params: Any = None,
    template: Optional[AppTemplate] = None,
    reader: Optional[TextIO] = None,
    writer: Optional[TextIO] = None,
) -> List[Tool]:
    """Return the app-editor tools, all sharing one :class:`AppTemplate`."""
    app = template if template is not None else AppTemplate()
    reader = reader or sys.stdin
    writer = writer or sys.stdout
    confirmation = confirmation_chain(llm, params, reader, writer)

    @tool("list-tables")
    def list_tables(ctx: RunContext, tool_input: str) -> str:
        """List the tables in the app. It does not take any input."""
        return ",".join(t.name for t in app.tables)

    @tool("add-table", examples=["some-table-name"], args=["table name"])
    def add_table(ctx: RunContext, tool_input: str) -> str:
        """Add a table within the app. The input is the name of the table."""
        table_name = _single_arg(tool_input)
        _confirm(ctx, confirmation, f"Adding table {table_name}")
        app.tables.append(AppTable(name=table_name))
        return f"Table {table_name} added"

    @tool("remove-table", examples=["some-table-name"], args=["table name"])
    def remove_table(ctx: RunContext, tool_input: str) -> str:
        """Remove a table within the app. The input is the name of the table."""
        table_name = _single_arg(tool_input)
        _confirm(ctx, confirmation, f"Removing table {table_name}")
        for i, table in enumerate(app.tables):
            if table.name == table_name:
                del app.tables[i]
                return f"Table {table_name} removed"
        raise LookupError(f"Table {table_name} not found")

    @tool("save-app-template", examples=["some/file/name"], args=["file name"])
    def save_app_template(ctx: RunContext, tool_input: str) -> str:
        """Save the app template. The input is the file name."""
        path = Path(_single_arg(tool_input))
        path.write_text(app.model_dump_json(), encoding="utf-8")
        logger.info("Saved app template to %s", path)
        return "successfully wrote AppTemplate"

    return [
        user_input_tool(reader, writer),
        list_tables,
        add_table,
        remove_table,
        save_app_template,
    ]
