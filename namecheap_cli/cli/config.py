"""
config command group
"""

from namecheap_cli.output.renderer import Column, Schema
from namecheap_cli.utils.config import CONFIG_KEYS, READ_ONLY_KEYS


VALUE_SCHEMA = Schema(
    columns=[
        Column("Key", "key"),
        Column("Value", "value"),
    ],
    noun="key",
    show_total=False,
)

PATH_SCHEMA = Schema(columns=[Column("Config File", "path", truncate=False)])


def cmd_config_get(args, ctx):
    return ctx.guard.run(
        "Reading config...",
        lambda: {"key": args.key, "value": ctx.store.get_value(args.key)},
        VALUE_SCHEMA,
    )


def cmd_config_set(args, ctx):
    return ctx.guard.run(
        "Writing config...",
        lambda: {"key": args.key, "value": ctx.store.set_value(args.key, args.value)},
        VALUE_SCHEMA,
    )


def cmd_config_list(args, ctx):
    """All keys; the API key itself is never shown"""

    def listing():
        rows = [{"key": key, "value": ctx.store.get_value(key)} for key in CONFIG_KEYS + READ_ONLY_KEYS]
        has_key = ctx.store.read().credentials is not None
        rows.append({"key": "credentials.api_key", "value": "***hidden***" if has_key else None})
        return rows

    return ctx.guard.run("Reading config...", listing, VALUE_SCHEMA)


def cmd_config_path(args, ctx):
    return ctx.guard.run("Locating config...", lambda: {"path": str(ctx.store.path)}, PATH_SCHEMA)


def register(subparsers, parents):
    """Add the config command group"""
    output = parents["output"]

    group = subparsers.add_parser("config", help="CLI configuration")
    commands = group.add_subparsers(dest="config_command", help="Configuration operations")
    group.set_defaults(help_parser=group)

    get_parser = commands.add_parser("get", parents=[output], help="Show one setting")
    get_parser.add_argument("key", choices=CONFIG_KEYS + READ_ONLY_KEYS, help="Setting name")
    get_parser.set_defaults(func=cmd_config_get)

    set_parser = commands.add_parser("set", parents=[output], help="Change a setting")
    set_parser.add_argument("key", choices=CONFIG_KEYS, help="Setting name")
    set_parser.add_argument("value", help="New value")
    set_parser.set_defaults(func=cmd_config_set)

    list_parser = commands.add_parser("list", parents=[output], help="Show all settings")
    list_parser.set_defaults(func=cmd_config_list)

    path_parser = commands.add_parser("path", parents=[output], help="Show the config file location")
    path_parser.set_defaults(func=cmd_config_path)
