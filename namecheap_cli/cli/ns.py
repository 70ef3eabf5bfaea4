"""
ns command group
"""

from namecheap_cli.output.formatters import yes_no
from namecheap_cli.output.renderer import Column, Schema
from namecheap_cli.services import DnsService, NameserverService


NAMESERVER_SCHEMA = Schema(columns=[
    Column("Domain", "domain"),
    Column("Namecheap DNS", "is_using_our_dns", format=yes_no),
    Column("Nameservers", "nameservers"),
])

CHILD_SCHEMA = Schema(columns=[
    Column("Nameserver", "nameserver"),
    Column("IP", "ip"),
    Column("Statuses", "statuses"),
])

ACTION_SCHEMA = Schema(columns=[
    Column("Target", "target"),
    Column("Result", "action"),
    Column("Details", "detail"),
])


def cmd_ns_list(args, ctx):
    service = DnsService(ctx.client)
    return ctx.guard.run("Fetching nameservers...", lambda: service.get_nameservers(args.domain), NAMESERVER_SCHEMA)


def cmd_ns_set(args, ctx):
    """Point the domain at custom nameservers"""
    service = DnsService(ctx.client)
    return ctx.guard.run(
        "Setting nameservers...",
        lambda: service.set_custom_nameservers(args.domain, args.nameservers),
        ACTION_SCHEMA,
    )


def cmd_ns_reset(args, ctx):
    service = DnsService(ctx.client)
    return ctx.guard.run(
        "Resetting nameservers...",
        lambda: service.set_default_nameservers(args.domain),
        ACTION_SCHEMA,
        confirm=f"Reset {args.domain} to Namecheap nameservers? Custom DNS will stop resolving.",
    )


def cmd_ns_create(args, ctx):
    service = NameserverService(ctx.client)
    return ctx.guard.run(
        "Creating nameserver...",
        lambda: service.create(args.domain, args.nameserver, args.ip),
        ACTION_SCHEMA,
    )


def cmd_ns_delete(args, ctx):
    service = NameserverService(ctx.client)
    return ctx.guard.run(
        "Deleting nameserver...",
        lambda: service.delete(args.domain, args.nameserver),
        ACTION_SCHEMA,
        confirm=f"Delete nameserver {args.nameserver}?",
    )


def cmd_ns_info(args, ctx):
    service = NameserverService(ctx.client)
    return ctx.guard.run(
        "Fetching nameserver info...",
        lambda: service.get_info(args.domain, args.nameserver),
        CHILD_SCHEMA,
    )


def cmd_ns_update(args, ctx):
    service = NameserverService(ctx.client)
    return ctx.guard.run(
        "Updating nameserver...",
        lambda: service.update(args.domain, args.nameserver, args.old_ip, args.ip),
        ACTION_SCHEMA,
    )


def register(subparsers, parents):
    """Add the ns command group"""
    output, confirm = parents["output"], parents["confirm"]

    group = subparsers.add_parser("ns", help="Nameserver management")
    commands = group.add_subparsers(dest="ns_command", help="Nameserver operations")
    group.set_defaults(help_parser=group)

    list_parser = commands.add_parser("list", parents=[output], help="Show the domain's nameservers")
    list_parser.add_argument("domain", help="Domain name")
    list_parser.set_defaults(func=cmd_ns_list)

    set_parser = commands.add_parser("set", parents=[output], help="Use custom nameservers")
    set_parser.add_argument("domain", help="Domain name")
    set_parser.add_argument("nameservers", nargs="+", help="Two or more nameserver hostnames")
    set_parser.set_defaults(func=cmd_ns_set)

    reset_parser = commands.add_parser("reset", parents=[output, confirm], help="Reset to Namecheap nameservers")
    reset_parser.add_argument("domain", help="Domain name")
    reset_parser.set_defaults(func=cmd_ns_reset)

    create_parser = commands.add_parser("create", parents=[output], help="Create a child nameserver")
    create_parser.add_argument("domain", help="Parent domain")
    create_parser.add_argument("nameserver", help="Nameserver hostname, e.g. ns1.example.com")
    create_parser.add_argument("ip", help="Nameserver IP address")
    create_parser.set_defaults(func=cmd_ns_create)

    delete_parser = commands.add_parser("delete", parents=[output, confirm], help="Delete a child nameserver")
    delete_parser.add_argument("domain", help="Parent domain")
    delete_parser.add_argument("nameserver", help="Nameserver hostname")
    delete_parser.set_defaults(func=cmd_ns_delete)

    info_parser = commands.add_parser("info", parents=[output], help="Show child nameserver details")
    info_parser.add_argument("domain", help="Parent domain")
    info_parser.add_argument("nameserver", help="Nameserver hostname")
    info_parser.set_defaults(func=cmd_ns_info)

    update_parser = commands.add_parser("update", parents=[output], help="Change a child nameserver's IP")
    update_parser.add_argument("domain", help="Parent domain")
    update_parser.add_argument("nameserver", help="Nameserver hostname")
    update_parser.add_argument("--old-ip", required=True, help="Current IP address")
    update_parser.add_argument("--ip", required=True, help="New IP address")
    update_parser.set_defaults(func=cmd_ns_update)
