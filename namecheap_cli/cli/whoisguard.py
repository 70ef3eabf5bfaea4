"""
whoisguard command group
"""

from namecheap_cli.cli.context import add_paging_arguments, cursor_from
from namecheap_cli.output.formatters import badge_style, enabled, format_currency, format_expiry, expiry_style, yes_no
from namecheap_cli.output.renderer import Column, Schema
from namecheap_cli.services import WhoisGuardService
from namecheap_cli.services.whoisguard_service import LIST_TYPES


SUBSCRIPTION_SCHEMA = Schema(
    columns=[
        Column("ID", "id"),
        Column("Domain", "domain_name"),
        Column("Enabled", "enabled", format=enabled, style=badge_style),
        Column("Expires", "expire_date", format=format_expiry, style=expiry_style),
        Column("Status", "status"),
    ],
    empty_message="No WhoisGuard subscriptions found.",
    noun="subscription",
)

RENEWAL_SCHEMA = Schema(columns=[
    Column("WhoisGuard ID", "whoisguard_id"),
    Column("Years", "years"),
    Column("Renewed", "renewed", format=yes_no, style=badge_style),
    Column("Charged", "charged_amount", format=format_currency),
    Column("Order ID", "order_id"),
    Column("Transaction ID", "transaction_id"),
])

ACTION_SCHEMA = Schema(columns=[
    Column("Target", "target"),
    Column("Result", "action"),
    Column("Details", "detail"),
])


def cmd_whoisguard_list(args, ctx):
    service = WhoisGuardService(ctx.client)
    return ctx.guard.run(
        "Fetching WhoisGuard subscriptions...",
        lambda: service.list_subscriptions(cursor_from(args), list_type=args.type),
        SUBSCRIPTION_SCHEMA,
    )


def cmd_whoisguard_enable(args, ctx):
    service = WhoisGuardService(ctx.client)
    return ctx.guard.run(
        "Enabling WhoisGuard...",
        lambda: service.enable(args.target, args.forward_to),
        ACTION_SCHEMA,
    )


def cmd_whoisguard_disable(args, ctx):
    service = WhoisGuardService(ctx.client)
    return ctx.guard.run(
        "Disabling WhoisGuard...",
        lambda: service.disable(args.target),
        ACTION_SCHEMA,
        confirm=f"Disable WhoisGuard for {args.target}? Your contact details become public.",
    )


def cmd_whoisguard_allot(args, ctx):
    service = WhoisGuardService(ctx.client)
    return ctx.guard.run(
        "Allotting WhoisGuard...",
        lambda: service.allot(args.whoisguard_id, args.domain),
        ACTION_SCHEMA,
    )


def cmd_whoisguard_unallot(args, ctx):
    service = WhoisGuardService(ctx.client)
    return ctx.guard.run(
        "Unallotting WhoisGuard...",
        lambda: service.unallot(args.target),
        ACTION_SCHEMA,
        confirm=f"Remove WhoisGuard subscription from {args.target}?",
    )


def cmd_whoisguard_renew(args, ctx):
    service = WhoisGuardService(ctx.client)
    return ctx.guard.run(
        "Renewing WhoisGuard...",
        lambda: service.renew(args.target, years=args.years, promo_code=args.promo_code),
        RENEWAL_SCHEMA,
        confirm=f"Renew WhoisGuard for {args.target} for {args.years} year(s)? Your account will be charged.",
    )


def register(subparsers, parents):
    """Add the whoisguard command group"""
    output, confirm = parents["output"], parents["confirm"]

    group = subparsers.add_parser("whoisguard", help="WhoisGuard privacy protection")
    commands = group.add_subparsers(dest="whoisguard_command", help="WhoisGuard operations")
    group.set_defaults(help_parser=group)

    list_parser = commands.add_parser("list", parents=[output], help="List WhoisGuard subscriptions")
    list_parser.add_argument(
        "--type", default="ALL", type=str.upper, choices=LIST_TYPES, help="Subscription filter (default: ALL)"
    )
    add_paging_arguments(list_parser)
    list_parser.set_defaults(func=cmd_whoisguard_list)

    enable_parser = commands.add_parser("enable", parents=[output], help="Enable WhoisGuard")
    enable_parser.add_argument("target", help="Domain name or WhoisGuard ID")
    enable_parser.add_argument("forward_to", help="Email address that receives forwarded mail")
    enable_parser.set_defaults(func=cmd_whoisguard_enable)

    disable_parser = commands.add_parser("disable", parents=[output, confirm], help="Disable WhoisGuard")
    disable_parser.add_argument("target", help="Domain name or WhoisGuard ID")
    disable_parser.set_defaults(func=cmd_whoisguard_disable)

    allot_parser = commands.add_parser("allot", parents=[output], help="Assign a subscription to a domain")
    allot_parser.add_argument("whoisguard_id", help="WhoisGuard ID")
    allot_parser.add_argument("domain", help="Domain name")
    allot_parser.set_defaults(func=cmd_whoisguard_allot)

    unallot_parser = commands.add_parser("unallot", parents=[output, confirm], help="Detach a subscription from its domain")
    unallot_parser.add_argument("target", help="Domain name or WhoisGuard ID")
    unallot_parser.set_defaults(func=cmd_whoisguard_unallot)

    renew_parser = commands.add_parser("renew", parents=[output, confirm], help="Renew a subscription")
    renew_parser.add_argument("target", help="Domain name or WhoisGuard ID")
    renew_parser.add_argument("--years", type=int, default=1, help="Years to renew (default: 1)")
    renew_parser.add_argument("--promo-code", help="Promotion code")
    renew_parser.set_defaults(func=cmd_whoisguard_renew)
