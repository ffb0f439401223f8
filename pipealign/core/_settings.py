"""Defines core settings."""

import json
from pathlib import Path

from pipealign.core import __version__
from pipealign.core.config import add_setting

# pipealign.core.config

add_setting(
    name="version",
    group="pipealign.core.config",
    default=False,
    flags=["--version", "-V"],
    action="version",
    hidden=True,
    version=f"%(prog)s {__version__}",
    help_="Show the version number and exit",
    description="""
        If set, pipealign will print the current version number of the application
        and exit. All other configuration options will be ignored.
    """,
)

# pipealign.core.launch

add_setting(
    name="files",
    group="pipealign.core.launch",
    default=[],
    flags=["files"],
    nargs="*",
    type_=Path,
    help_="List of file names to open",
    schema={
        "type": "array",
        "items": {
            "description": "File path",
            "type": "string",
        },
    },
    description="""
        A list of file paths to open when pipealign is launched.
    """,
)

add_setting(
    name="preview",
    group="pipealign.core.launch",
    default=False,
    help_="Print the aligned files instead of editing them",
    description="""
        If set, the files are printed to the standard output with their tables
        aligned, instead of being opened in the editor.
    """,
)

# pipealign.core.plan

add_setting(
    name="table_style",
    group="pipealign.core.plan",
    type_=str,
    default="auto",
    choices=["auto", "markdown", "org"],
    help_="The syntax the tables are written in",
    description="""
        The table syntax determines how column alignment is found.
        - ``markdown``: colons in the separator row mark right and left aligned
          columns
        - ``org``: alignment is inferred from the padding of the cells in each
          column
        - ``auto``: the syntax is chosen from the file's extension
    """,
)

add_setting(
    name="separator_style",
    group="pipealign.core.plan",
    type_=str,
    default="multi-column",
    choices=["multi-column", "single-column"],
    help_="How separator rows are drawn",
    description="""
        Separator rows are either drawn as one rule per column, keeping the column
        breaks visible, or as a single rule spanning the whole table.
    """,
)

add_setting(
    name="fixed_pad",
    group="pipealign.core.plan",
    type_=int,
    default=1,
    schema={"minimum": 0},
    help_="Padding added to the width of each column",
    description="""
        The width added to the widest cell of each column when computing the
        column's width.
    """,
)

add_setting(
    name="space_width",
    group="pipealign.core.plan",
    type_=float,
    default=0.0,
    schema={"minimum": 0},
    help_="The width of the space after each bar",
    description="""
        The width of the space following each bar. When zero, the width of a space
        character is measured.
    """,
)

add_setting(
    name="fancy_bar",
    group="pipealign.core.plan",
    default=False,
    help_="Draw table bars as full-height lines",
    description="""
        If set, the bars of aligned tables are displayed using box drawing
        characters, and separator rows are drawn as solid rules. This does not
        affect the layout of the table.
    """,
)

add_setting(
    name="max_table_size",
    group="pipealign.core.plan",
    type_=int,
    default=4000,
    schema={"minimum": 0},
    help_="The largest table to align",
    description="""
        Tables containing more characters than this are left unaligned. Set to
        zero to align tables of any size.
    """,
)

# pipealign.core.log

add_setting(
    name="log_file",
    group="pipealign.core.log",
    flags=["--log-file"],
    nargs="?",
    default="",
    type_=str,
    title="the log file path",
    help_="File path for logs",
    description="""
        When set to a file path, the log output will be written to the given path.
        If no value is given output will be sent to the standard output.
    """,
)

add_setting(
    name="log_level",
    group="pipealign.core.log",
    type_=str,
    default="warning",
    title="the log level",
    help_="Set the log level",
    choices=["debug", "info", "warning", "error", "critical"],
    description="""
        When set, logging events at the given level are emitted.
    """,
)

add_setting(
    name="log_level_stdout",
    group="pipealign.core.log",
    hidden=True,
    type_=str,
    default="critical",
    title="the log level at which to log to standard output",
    help_="Set the log level printed to standard out",
    choices=["debug", "info", "warning", "error", "critical"],
    description="""
        When set, logging events at the given level are printed to the standard
        output.
    """,
)

add_setting(
    name="log_config",
    group="pipealign.core.log",
    flags=["--log-config"],
    type_=json.loads,
    default={},
    schema={
        "type": "object",
    },
    title="additional logging configuration",
    help_="Additional logging configuration",
    description="""
        A JSON string specifying additional logging configuration.
    """,
)
