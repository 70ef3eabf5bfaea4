"""
domains command group
"""

from typing import Dict, List

from namecheap_cli.api.exceptions import ValidationError
from namecheap_cli.api.models import CONTACT_TYPES, ContactInfo, DomainContacts, load_contact
from namecheap_cli.cli.context import (
    add_paging_arguments,
    cursor_from,
    load_json_file,
)
from namecheap_cli.output.formatters import (
    available,
    badge_style,
    enabled,
    expiry_style,
    format_currency,
    format_date,
    format_expiry,
    locked,
    yes_no,
)
from namecheap_cli.output.renderer import Column, Schema
from namecheap_cli.services import DomainService


DOMAIN_LIST_SCHEMA = Schema(
    columns=[
        Column("Domain", "name"),
        Column("Expires", "expires", format=format_expiry, style=expiry_style),
        Column("Auto-Renew", "auto_renew", format=yes_no, style=badge_style),
        Column("Lock", "is_locked", format=locked, style=badge_style),
        Column("WhoisGuard", "whois_guard"),
        Column("DNS", "is_our_dns", format=lambda v: "Namecheap" if v else "Custom"),
    ],
    empty_message="No domains found.",
    noun="domain",
)

DOMAIN_INFO_SCHEMA = Schema(columns=[
    Column("Domain", "domain_name"),
    Column("Owner", "owner_name"),
    Column("Status", "status"),
    Column("Created", "created_date", format=format_date),
    Column("Expires", "expired_date", format=format_expiry, style=expiry_style),
    Column("Premium", "is_premium", format=yes_no),
    Column("DNS Provider", "dns_provider_type"),
    Column("Nameservers", "nameservers"),
    Column("WhoisGuard", "whoisguard_enabled", format=enabled, style=badge_style),
    Column("WhoisGuard ID", "whoisguard_id"),
    Column("WhoisGuard Expires", "whoisguard_expires", format=format_date),
])

AVAILABILITY_SCHEMA = Schema(
    columns=[
        Column("Domain", "domain"),
        Column("Status", "available", format=available, style=badge_style),
        Column("Premium", "premium", format=yes_no),
        Column("Price", "premium_price", format=format_currency),
    ],
    empty_message="No results.",
    noun="domain",
    show_total=False,
)

LOCK_SCHEMA = Schema(columns=[
    Column("Domain", "domain"),
    Column("Registrar Lock", "locked", format=locked, style=badge_style),
])

REGISTRATION_SCHEMA = Schema(columns=[
    Column("Domain", "domain"),
    Column("Registered", "registered", format=yes_no, style=badge_style),
    Column("Charged", "charged_amount", format=format_currency),
    Column("Domain ID", "domain_id"),
    Column("Order ID", "order_id"),
    Column("Transaction ID", "transaction_id"),
    Column("WhoisGuard", "whoisguard_enabled", format=enabled),
])

RENEWAL_SCHEMA = Schema(columns=[
    Column("Domain", "domain_name"),
    Column("Success", "renewed", format=yes_no, style=badge_style),
    Column("Charged", "charged_amount", format=format_currency),
    Column("Order ID", "order_id"),
    Column("Transaction ID", "transaction_id"),
    Column("New Expiry", "expire_date", format=format_date),
])

CONTACT_SCHEMA = Schema(columns=[
    Column("Name", getter=lambda c: f"{c.first_name} {c.last_name}"),
    Column("Organization", "organization_name"),
    Column("Job Title", "job_title"),
    Column("Email", "email"),
    Column("Phone", getter=lambda c: f"{c.phone} x{c.phone_ext}" if c.phone_ext else c.phone),
    Column("Fax", "fax"),
    Column("Address", getter=lambda c: ", ".join(p for p in (c.address1, c.address2) if p)),
    Column("City", "city"),
    Column("State/Province", "state_province"),
    Column("Postal Code", "postal_code"),
    Column("Country", "country"),
])

CONTACTS_SCHEMA = Schema(
    columns=[
        Column("Type", getter=lambda row: row[0]),
        Column("Name", getter=lambda row: f"{row[1].first_name} {row[1].last_name}"),
        Column("Organization", getter=lambda row: row[1].organization_name),
        Column("Email", getter=lambda row: row[1].email),
        Column("Phone", getter=lambda row: row[1].phone),
        Column("Country", getter=lambda row: row[1].country),
    ],
    show_total=False,
)

ACTION_SCHEMA = Schema(columns=[
    Column("Domain", "target"),
    Column("Result", "action"),
    Column("Details", "detail"),
])


def _split_names(values: List[str]) -> List[str]:
    names = []
    for value in values:
        names.extend(part.strip() for part in value.split(",") if part.strip())
    return names


def load_contacts(path: str) -> Dict[str, ContactInfo]:
    """
    Read contacts from a JSON file.

    The file holds either one contact object, or an object keyed by
    registrant/tech/admin/aux_billing.
    """
    data = load_json_file(path, "contact file")
    if not isinstance(data, dict):
        raise ValidationError("Contact file must contain a JSON object")

    if any(key in data for key in CONTACT_TYPES):
        unknown = set(data) - set(CONTACT_TYPES)
        if unknown:
            raise ValidationError(
                f"Unknown contact type in {path}: {', '.join(sorted(unknown))}",
                f"Valid types: {', '.join(CONTACT_TYPES)}",
            )
        return {key: load_contact(value, f"{key} contact") for key, value in data.items()}

    return {"registrant": load_contact(data, "contact")}


def registration_contacts(path: str) -> DomainContacts:
    """Contacts for a registration; missing types default to the registrant"""
    contacts = load_contacts(path)
    if "registrant" not in contacts:
        raise ValidationError("Contact file must include a registrant contact")
    registrant = contacts["registrant"]
    return DomainContacts(**{t: contacts.get(t, registrant) for t in CONTACT_TYPES})


# ============================================================================
# Commands
# ============================================================================

def cmd_domains_list(args, ctx):
    """List domains in the account"""
    service = DomainService(ctx.client)
    return ctx.guard.run(
        "Fetching domains...",
        lambda: service.list_domains(cursor_from(args), search=args.search, list_type=args.type),
        DOMAIN_LIST_SCHEMA,
    )


def cmd_domains_info(args, ctx):
    service = DomainService(ctx.client)
    return ctx.guard.run("Fetching domain info...", lambda: service.get_info(args.domain), DOMAIN_INFO_SCHEMA)


def cmd_domains_check(args, ctx):
    """Check availability of one or more domains in a single request"""
    service = DomainService(ctx.client)
    return ctx.guard.run(
        "Checking availability...",
        lambda: service.check(_split_names(args.domains)),
        AVAILABILITY_SCHEMA,
    )


def cmd_domains_lock_status(args, ctx):
    service = DomainService(ctx.client)
    return ctx.guard.run("Fetching lock status...", lambda: service.get_lock(args.domain), LOCK_SCHEMA)


def cmd_domains_lock(args, ctx):
    service = DomainService(ctx.client)
    return ctx.guard.run("Locking domain...", lambda: service.set_lock(args.domain, True), ACTION_SCHEMA)


def cmd_domains_unlock(args, ctx):
    service = DomainService(ctx.client)
    return ctx.guard.run("Unlocking domain...", lambda: service.set_lock(args.domain, False), ACTION_SCHEMA)


def cmd_domains_register(args, ctx):
    """Register a new domain (charges the account)"""
    service = DomainService(ctx.client)
    nameservers = _split_names(args.nameservers) if args.nameservers else None

    try:
        contacts = registration_contacts(args.contact_file)
    except ValidationError as e:
        return ctx.guard.fail(e)

    register = dict(
        domain=args.domain,
        contacts=contacts,
        years=args.years,
        nameservers=nameservers,
        whoisguard=not args.no_whoisguard,
        promo_code=args.promo_code,
    )

    if args.dry_run:
        return ctx.guard.run("Preparing registration...", lambda: service.registration_params(**register))

    return ctx.guard.run(
        f"Registering {args.domain}...",
        lambda: service.register(**register),
        REGISTRATION_SCHEMA,
        confirm=f"Register {args.domain} for {args.years} year(s)? Your account will be charged.",
    )


def cmd_domains_renew(args, ctx):
    service = DomainService(ctx.client)
    return ctx.guard.run(
        f"Renewing {args.domain}...",
        lambda: service.renew(args.domain, args.years, args.promo_code),
        RENEWAL_SCHEMA,
        confirm=f"Renew {args.domain} for {args.years} year(s)? Your account will be charged.",
    )


def cmd_domains_reactivate(args, ctx):
    service = DomainService(ctx.client)
    return ctx.guard.run(
        f"Reactivating {args.domain}...",
        lambda: service.reactivate(args.domain, args.years, args.promo_code),
        RENEWAL_SCHEMA,
        confirm=f"Reactivate {args.domain}? Your account will be charged.",
    )


def cmd_domains_contacts(args, ctx):
    """Show contacts, or replace them from a JSON file with --set"""
    service = DomainService(ctx.client)

    if args.set:
        try:
            contacts = load_contacts(args.set)
            if args.type:
                if len(contacts) != 1 or "registrant" not in contacts:
                    raise ValidationError("With --type, the file must hold a single contact object")
                contacts = {args.type: contacts["registrant"]}
        except ValidationError as e:
            return ctx.guard.fail(e)
        return ctx.guard.run("Updating contacts...", lambda: service.set_contacts(args.domain, contacts), ACTION_SCHEMA)

    def show():
        result = service.get_contacts(args.domain)
        if not result.ok or ctx.structured:
            return result.map(lambda c: getattr(c, args.type) if args.type else c)
        contacts = result.value
        if args.type:
            return getattr(contacts, args.type)
        return [(t.replace("_", " ").title(), getattr(contacts, t)) for t in CONTACT_TYPES]

    schema = CONTACT_SCHEMA if args.type else CONTACTS_SCHEMA
    return ctx.guard.run("Fetching contacts...", show, schema)


def register(subparsers, parents):
    """Add the domains command group"""
    output, confirm = parents["output"], parents["confirm"]

    group = subparsers.add_parser("domains", help="Domain management")
    commands = group.add_subparsers(dest="domains_command", help="Domain operations")
    group.set_defaults(help_parser=group)

    list_parser = commands.add_parser("list", parents=[output], help="List domains in your account")
    add_paging_arguments(list_parser)
    list_parser.add_argument("--search", help="Filter by keyword")
    list_parser.add_argument("--type", default="ALL", choices=["ALL", "EXPIRING", "EXPIRED"], help="Domain list type")
    list_parser.set_defaults(func=cmd_domains_list)

    info_parser = commands.add_parser("info", parents=[output], help="Show domain details")
    info_parser.add_argument("domain", help="Domain name")
    info_parser.set_defaults(func=cmd_domains_info)

    check_parser = commands.add_parser("check", parents=[output], help="Check domain availability")
    check_parser.add_argument("domains", nargs="+", help="Domain names (space or comma separated)")
    check_parser.set_defaults(func=cmd_domains_check)

    status_parser = commands.add_parser("lock-status", parents=[output], help="Show registrar lock status")
    status_parser.add_argument("domain", help="Domain name")
    status_parser.set_defaults(func=cmd_domains_lock_status)

    lock_parser = commands.add_parser("lock", parents=[output], help="Enable registrar lock")
    lock_parser.add_argument("domain", help="Domain name")
    lock_parser.set_defaults(func=cmd_domains_lock)

    unlock_parser = commands.add_parser("unlock", parents=[output], help="Disable registrar lock")
    unlock_parser.add_argument("domain", help="Domain name")
    unlock_parser.set_defaults(func=cmd_domains_unlock)

    register_parser = commands.add_parser("register", parents=[output, confirm], help="Register a domain")
    register_parser.add_argument("domain", help="Domain name to register")
    register_parser.add_argument("--contact-file", required=True, help="Path to contact JSON file")
    register_parser.add_argument("--years", type=int, default=1, help="Registration period in years (default: 1)")
    register_parser.add_argument("--nameservers", nargs="+", help="Custom nameservers (default: Namecheap)")
    register_parser.add_argument("--no-whoisguard", action="store_true", help="Do not add free WhoisGuard")
    register_parser.add_argument("--promo-code", help="Promotion code")
    register_parser.add_argument("--dry-run", action="store_true", help="Show the request parameters without registering")
    register_parser.set_defaults(func=cmd_domains_register)

    renew_parser = commands.add_parser("renew", parents=[output, confirm], help="Renew a domain")
    renew_parser.add_argument("domain", help="Domain name")
    renew_parser.add_argument("--years", type=int, default=1, help="Years to renew (default: 1)")
    renew_parser.add_argument("--promo-code", help="Promotion code")
    renew_parser.set_defaults(func=cmd_domains_renew)

    reactivate_parser = commands.add_parser("reactivate", parents=[output, confirm], help="Reactivate an expired domain")
    reactivate_parser.add_argument("domain", help="Domain name")
    reactivate_parser.add_argument("--years", type=int, default=1, help="Years to add (default: 1)")
    reactivate_parser.add_argument("--promo-code", help="Promotion code")
    reactivate_parser.set_defaults(func=cmd_domains_reactivate)

    contacts_parser = commands.add_parser("contacts", parents=[output], help="Show or update domain contacts")
    contacts_parser.add_argument("domain", help="Domain name")
    contacts_parser.add_argument("--type", choices=list(CONTACT_TYPES), help="Single contact type")
    contacts_parser.add_argument("--set", metavar="FILE", help="Replace contacts from a JSON file")
    contacts_parser.set_defaults(func=cmd_domains_contacts)
