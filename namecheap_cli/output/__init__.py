"""
Output rendering: structured (JSON) and human (tables, label/value lists)
"""

from namecheap_cli.output.renderer import (
    HUMAN,
    STRUCTURED,
    Column,
    Schema,
    render,
    render_error,
)

__all__ = [
    "HUMAN",
    "STRUCTURED",
    "Column",
    "Schema",
    "render",
    "render_error",
]
