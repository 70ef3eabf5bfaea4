"""
dns command group
"""

from namecheap_cli.output.formatters import badge_style, format_ttl, yes_no
from namecheap_cli.output.renderer import Column, Schema
from namecheap_cli.services import DnsService


RECORD_SCHEMA = Schema(
    columns=[
        Column("ID", "host_id"),
        Column("Host", "name"),
        Column("Type", "type"),
        Column("Address", "address"),
        Column("TTL", "ttl", format=format_ttl),
        Column("MX Pref", "mx_pref"),
        Column("Active", "is_active", format=yes_no, style=badge_style),
    ],
    empty_message="No DNS records found.",
    noun="record",
)

FORWARD_SCHEMA = Schema(
    columns=[
        Column("Mailbox", "mailbox"),
        Column("Forwards To", "forward_to"),
    ],
    empty_message="No email forwards found.",
    noun="forward",
)

ACTION_SCHEMA = Schema(columns=[
    Column("Domain", "target"),
    Column("Result", "action"),
    Column("Details", "detail"),
])


def cmd_dns_list(args, ctx):
    service = DnsService(ctx.client)
    return ctx.guard.run("Fetching DNS records...", lambda: service.list_records(args.domain), RECORD_SCHEMA)


def cmd_dns_add(args, ctx):
    """Add a host record, keeping existing records"""
    service = DnsService(ctx.client)
    return ctx.guard.run(
        "Adding DNS record...",
        lambda: service.add_record(
            args.domain, args.host, args.type, args.address, ttl=args.ttl, mx_pref=args.mx_pref
        ),
        ACTION_SCHEMA,
    )


def cmd_dns_set(args, ctx):
    """Update an existing record by its host ID"""
    service = DnsService(ctx.client)
    return ctx.guard.run(
        "Updating DNS record...",
        lambda: service.update_record(
            args.domain,
            args.host_id,
            name=args.name,
            record_type=args.type,
            address=args.address,
            ttl=args.ttl,
            mx_pref=args.mx_pref,
        ),
        ACTION_SCHEMA,
    )


def cmd_dns_rm(args, ctx):
    service = DnsService(ctx.client)
    return ctx.guard.run(
        "Removing DNS record...",
        lambda: service.remove_record(args.domain, args.host_id),
        ACTION_SCHEMA,
        confirm=f"Delete DNS record {args.host_id} from {args.domain}?",
    )


def cmd_dns_email_list(args, ctx):
    service = DnsService(ctx.client)
    return ctx.guard.run("Fetching email forwards...", lambda: service.list_forwards(args.domain), FORWARD_SCHEMA)


def cmd_dns_email_add(args, ctx):
    service = DnsService(ctx.client)
    return ctx.guard.run(
        "Adding email forward...",
        lambda: service.add_forward(args.domain, args.mailbox, args.forward_to),
        ACTION_SCHEMA,
    )


def cmd_dns_email_rm(args, ctx):
    service = DnsService(ctx.client)
    return ctx.guard.run(
        "Removing email forward...",
        lambda: service.remove_forward(args.domain, args.mailbox),
        ACTION_SCHEMA,
        confirm=f"Remove email forward {args.mailbox}@{args.domain}?",
    )


def register(subparsers, parents):
    """Add the dns command group"""
    output, confirm = parents["output"], parents["confirm"]

    group = subparsers.add_parser("dns", help="DNS record management")
    commands = group.add_subparsers(dest="dns_command", help="DNS operations")
    group.set_defaults(help_parser=group)

    list_parser = commands.add_parser("list", parents=[output], help="List DNS records")
    list_parser.add_argument("domain", help="Domain name")
    list_parser.set_defaults(func=cmd_dns_list)

    add_parser = commands.add_parser("add", parents=[output], help="Add a DNS record")
    add_parser.add_argument("domain", help="Domain name")
    add_parser.add_argument("host", help="Host name (@ for root)")
    add_parser.add_argument("type", help="Record type (A, AAAA, CNAME, MX, TXT, ...)")
    add_parser.add_argument("address", help="Record value")
    add_parser.add_argument("--ttl", type=int, help="TTL in seconds (default: 1800)")
    add_parser.add_argument("--mx-pref", type=int, help="MX preference (default: 10 for MX records)")
    add_parser.set_defaults(func=cmd_dns_add)

    set_parser = commands.add_parser("set", parents=[output], help="Update a DNS record")
    set_parser.add_argument("domain", help="Domain name")
    set_parser.add_argument("host_id", help="Record ID (see dns list)")
    set_parser.add_argument("--name", help="New host name")
    set_parser.add_argument("--type", help="New record type")
    set_parser.add_argument("--address", help="New record value")
    set_parser.add_argument("--ttl", type=int, help="New TTL in seconds")
    set_parser.add_argument("--mx-pref", type=int, help="New MX preference")
    set_parser.set_defaults(func=cmd_dns_set)

    rm_parser = commands.add_parser("rm", parents=[output, confirm], help="Remove a DNS record")
    rm_parser.add_argument("domain", help="Domain name")
    rm_parser.add_argument("host_id", help="Record ID (see dns list)")
    rm_parser.set_defaults(func=cmd_dns_rm)

    email_parser = commands.add_parser("email", help="Email forwarding")
    email_commands = email_parser.add_subparsers(dest="dns_email_command", help="Email forwarding operations")
    email_parser.set_defaults(help_parser=email_parser)

    email_list = email_commands.add_parser("list", parents=[output], help="List email forwards")
    email_list.add_argument("domain", help="Domain name")
    email_list.set_defaults(func=cmd_dns_email_list)

    email_add = email_commands.add_parser("add", parents=[output], help="Add an email forward")
    email_add.add_argument("domain", help="Domain name")
    email_add.add_argument("mailbox", help="Mailbox name (the part before @)")
    email_add.add_argument("forward_to", help="Destination email address")
    email_add.set_defaults(func=cmd_dns_email_add)

    email_rm = email_commands.add_parser("rm", parents=[output, confirm], help="Remove an email forward")
    email_rm.add_argument("domain", help="Domain name")
    email_rm.add_argument("mailbox", help="Mailbox name")
    email_rm.set_defaults(func=cmd_dns_email_rm)
