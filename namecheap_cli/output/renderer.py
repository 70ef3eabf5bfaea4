"""
Dual-mode output renderer
Turns typed records into structured JSON or human tables, without side effects
"""

import json
from dataclasses import dataclass, field
from io import StringIO
from typing import Any, Callable, List, Optional, Sequence

from pydantic import BaseModel
from rich import box
from rich.console import Console
from rich.table import Table
from rich.text import Text

from namecheap_cli.api.client import Page
from namecheap_cli.api.exceptions import NamecheapError, NetworkError, ProtocolError
from namecheap_cli.output.formatters import NOT_APPLICABLE, display, truncate


STRUCTURED = "structured"
HUMAN = "human"
MODES = (STRUCTURED, HUMAN)

RENDER_WIDTH = 240


@dataclass
class Column:
    """
    One displayed field.

    ``field`` names the record attribute; ``getter`` replaces it when the cell
    needs several attributes (e.g. an amount and its currency). ``format``
    turns the raw value into text and ``style`` picks a terminal style for it.
    """

    header: str
    field: Optional[str] = None
    format: Optional[Callable[[Any], str]] = None
    getter: Optional[Callable[[Any], Any]] = None
    style: Optional[Callable[[Any], Optional[str]]] = None
    truncate: bool = True

    def raw(self, record: Any) -> Any:
        if self.getter is not None:
            return self.getter(record)
        if isinstance(record, dict):
            return record.get(self.field)
        return getattr(record, self.field, None)

    def text(self, record: Any) -> str:
        raw = self.raw(record)
        text = self.format(raw) if self.format else display(raw)
        return text if text not in (None, "") else NOT_APPLICABLE


@dataclass
class Schema:
    """How a record type is shown in human mode"""

    columns: List[Column] = field(default_factory=list)
    empty_message: str = "No results found."
    noun: str = "item"
    show_total: bool = True


def _jsonable(value: Any) -> Any:
    if isinstance(value, Page):
        return {
            "items": [_jsonable(item) for item in value.items],
            "page": value.cursor.page,
            "page_size": value.cursor.page_size,
            "total_items": value.cursor.total_items,
        }
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    return value


def render_structured(value: Any) -> str:
    """Stable JSON document: declaration-order keys, raw values, no decoration"""
    return json.dumps(_jsonable(value), indent=2, ensure_ascii=False)


def _default_schema(record: Any) -> Schema:
    if isinstance(record, BaseModel):
        return Schema(columns=[
            Column(name.replace("_", " ").title(), name) for name in type(record).model_fields
        ])
    if isinstance(record, dict):
        return Schema(columns=[Column(str(key), key) for key in record])
    return Schema()


def _cell(column: Column, record: Any, color: bool, truncate_text: bool) -> Text:
    text = column.text(record)
    if truncate_text and column.truncate:
        text = truncate(text)
    style = column.style(column.raw(record)) if (color and column.style) else None
    return Text(text, style=style or "")


def _to_string(renderable: Any, color: bool) -> str:
    buffer = StringIO()
    console = Console(
        file=buffer,
        width=RENDER_WIDTH,
        force_terminal=color,
        no_color=not color,
        color_system="standard" if color else None,
        highlight=False,
    )
    console.print(renderable)
    return "\n".join(line.rstrip() for line in buffer.getvalue().splitlines()).strip("\n")


def _table(records: Sequence[Any], schema: Schema, color: bool) -> str:
    table = Table(box=box.SIMPLE_HEAD, header_style="bold cyan" if color else "", pad_edge=False)
    for column in schema.columns:
        table.add_column(column.header, overflow="fold")
    for record in records:
        table.add_row(*(_cell(column, record, color, truncate_text=True) for column in schema.columns))
    return _to_string(table, color)


def _record(record: Any, schema: Schema, color: bool) -> str:
    grid = Table.grid(padding=(0, 2))
    grid.add_column(style="bold" if color else "")
    grid.add_column(overflow="fold")
    for column in schema.columns:
        grid.add_row(f"{column.header}:", _cell(column, record, color, truncate_text=False))
    return _to_string(grid, color)


def _plural(count: int, noun: str) -> str:
    return f"{count} {noun}" if count == 1 else f"{count} {noun}s"


def render_human(value: Any, schema: Optional[Schema] = None, color: bool = False) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value

    if isinstance(value, Page):
        if not value.items:
            return (schema or Schema()).empty_message
        body = render_human(list(value.items), schema, color)
        cursor = value.cursor
        if cursor.total_pages is not None:
            body += f"\nPage {cursor.page} of {cursor.total_pages} ({_plural(cursor.total_items, (schema or Schema()).noun)} total)"
        return body

    if isinstance(value, (list, tuple)):
        schema = schema or (_default_schema(value[0]) if value else Schema())
        if not value:
            return schema.empty_message
        body = _table(value, schema, color)
        if schema.show_total:
            body += f"\n\nTotal: {_plural(len(value), schema.noun)}"
        return body

    return _record(value, schema or _default_schema(value), color)


def render(value: Any, mode: str, schema: Optional[Schema] = None, color: bool = False) -> str:
    """
    Render a value for output.

    Args:
        value: Typed record, list of records, Page, dict or plain string
        mode: 'structured' (JSON) or 'human' (tables and label/value lists)
        schema: Columns and empty-list message for human mode
        color: Emit terminal styles (human mode only)

    Returns:
        Text ready to be written to stdout
    """
    if mode == STRUCTURED:
        return render_structured(value)
    if mode == HUMAN:
        return render_human(value, schema, color)
    raise ValueError(f"Unknown output mode: {mode}")


def render_error(error: NamecheapError, mode: str) -> str:
    """
    Render a classified error for stderr.

    Structured mode emits {"error": {kind, message, errors, suggestion}}.
    Human mode prints server errors verbatim with their codes, then the
    remediation hint when one is known.
    """
    errors = [e.to_dict() for e in getattr(error, "errors", [])]

    if mode == STRUCTURED:
        return render_structured({
            "error": {
                "kind": error.kind,
                "message": error.message,
                "errors": errors,
                "suggestion": error.suggestion,
            }
        })

    if errors:
        lines = ["API Error:"] + [f"  • [{e['code']}] {e['message']}" for e in errors]
    elif isinstance(error, NetworkError):
        lines = [f"Error: Could not reach the Namecheap API: {error.message}"]
    elif isinstance(error, ProtocolError):
        lines = [f"Error: Unexpected response from the Namecheap API: {error.message}"]
    else:
        lines = [f"Error: {error.message}"]

    if error.suggestion:
        lines.append(f"Suggestion: {error.suggestion}")
    return "\n".join(lines)
