"""
users command group
"""

from typing import Any, Dict

from pydantic import ValidationError as PydanticValidationError

from namecheap_cli.api.exceptions import AuthenticationError, ValidationError
from namecheap_cli.api.models import UserProfile
from namecheap_cli.output.formatters import badge_style, format_currency, yes_no
from namecheap_cli.output.renderer import Column, Schema
from namecheap_cli.services import UserService
from namecheap_cli.services.user_service import FIND_BY, PRICING_ACTIONS


def _money(field: str):
    """Column getter pairing an amount with the record's currency"""
    return lambda record: format_currency(getattr(record, field), record.currency)


BALANCE_SCHEMA = Schema(columns=[
    Column("Currency", "currency"),
    Column("Available Balance", getter=_money("available_balance")),
    Column("Account Balance", getter=_money("account_balance")),
    Column("Earned Amount", getter=_money("earned_amount")),
    Column("Withdrawable", getter=_money("withdrawable_amount")),
    Column("Needed for Auto-Renew", getter=_money("funds_required_for_auto_renew")),
])

PRICING_SCHEMA = Schema(
    columns=[
        Column("TLD", "product_name", format=lambda v: f".{v}" if v else ""),
        Column("Years", "duration"),
        Column("Price", getter=_money("price")),
        Column("Regular Price", getter=_money("regular_price")),
        Column("Your Price", getter=_money("your_price")),
        Column("Additional Cost", getter=_money("additional_cost")),
    ],
    empty_message="No pricing found.",
    noun="price",
)

FUNDS_REQUEST_SCHEMA = Schema(columns=[
    Column("Token ID", "token_id"),
    Column("Payment URL", "redirect_url", truncate=False),
    Column("Return URL", "return_url", truncate=False),
])

FUNDS_STATUS_SCHEMA = Schema(columns=[
    Column("Token ID", "token_id"),
    Column("Status", "status"),
    Column("Amount", "amount", format=format_currency),
    Column("Transaction ID", "transaction_id"),
])

PASSWORD_SCHEMA = Schema(columns=[
    Column("Changed", "success", format=yes_no, style=badge_style),
    Column("User ID", "user_id"),
])

ACCOUNT_SCHEMA = Schema(columns=[
    Column("Success", "success", format=yes_no, style=badge_style),
    Column("User ID", "user_id"),
])

LOGIN_SCHEMA = Schema(columns=[
    Column("User", "user_name"),
    Column("Login", "login_success", format=lambda ok: "Valid" if ok else "Rejected", style=badge_style),
])

RESET_SCHEMA = Schema(columns=[
    Column("Reset Email Sent", "success", format=yes_no, style=badge_style),
])

# argparse destinations are the UserProfile field names
PROFILE_FIELDS = tuple(UserProfile.model_fields)


def user_profile(args) -> UserProfile:
    values: Dict[str, Any] = {name: getattr(args, name, None) for name in PROFILE_FIELDS}
    try:
        return UserProfile(**{k: v for k, v in values.items() if v is not None})
    except PydanticValidationError as e:
        names = {field.alias: name for name, field in UserProfile.model_fields.items()}
        fields = sorted({names.get(str(err["loc"][0]), str(err["loc"][0])) for err in e.errors() if err["loc"]})
        raise ValidationError(
            f"Invalid user details: check {', '.join(fields)}",
            "Required: --first-name, --last-name, --email, --address1, --city, "
            "--state, --zip, --country, --phone",
        ) from e


def cmd_users_balances(args, ctx):
    service = UserService(ctx.client)
    return ctx.guard.run("Fetching balances...", service.get_balances, BALANCE_SCHEMA)


def cmd_users_pricing(args, ctx):
    service = UserService(ctx.client)
    return ctx.guard.run(
        "Fetching pricing...",
        lambda: service.get_pricing(action=args.action, tld=args.tld, years=args.years),
        PRICING_SCHEMA,
    )


def cmd_users_add_funds(args, ctx):
    """Create a funding request; payment happens at the returned URL"""
    service = UserService(ctx.client)
    return ctx.guard.run(
        "Creating funding request...",
        lambda: service.add_funds(args.amount, args.return_url),
        FUNDS_REQUEST_SCHEMA,
    )


def cmd_users_funds_status(args, ctx):
    service = UserService(ctx.client)
    return ctx.guard.run("Fetching funding status...", lambda: service.funds_status(args.token_id), FUNDS_STATUS_SCHEMA)


def cmd_users_change_password(args, ctx):
    service = UserService(ctx.client)

    try:
        new_password = args.new_password or ctx.guard.prompter.text("New password", password=True)
    except ValidationError as e:
        return ctx.guard.fail(e)

    return ctx.guard.run(
        "Changing password...",
        lambda: service.change_password(new_password, old_password=args.old_password, reset_code=args.reset_code),
        PASSWORD_SCHEMA,
        confirm="Change the account password?",
    )


def _password(args, ctx, prompt: str) -> str:
    return args.password or ctx.guard.prompter.text(prompt, password=True)


def cmd_users_create(args, ctx):
    service = UserService(ctx.client)

    try:
        profile = user_profile(args)
        password = _password(args, ctx, "Password for the new account")
    except ValidationError as e:
        return ctx.guard.fail(e)

    return ctx.guard.run(
        "Creating user account...",
        lambda: service.create_user(
            args.username,
            password,
            profile,
            accept_terms=args.accept_terms,
            accept_news=args.accept_news,
            ignore_duplicate_email=args.ignore_duplicate_email,
        ),
        ACCOUNT_SCHEMA,
    )


def cmd_users_update(args, ctx):
    service = UserService(ctx.client)

    try:
        profile = user_profile(args)
    except ValidationError as e:
        return ctx.guard.fail(e)

    return ctx.guard.run("Updating user information...", lambda: service.update_user(profile), ACCOUNT_SCHEMA)


def cmd_users_login(args, ctx):
    """Check a sub-account password; a rejected password exits non-zero"""
    service = UserService(ctx.client)

    try:
        password = _password(args, ctx, "Password")
    except ValidationError as e:
        return ctx.guard.fail(e)

    def check():
        outcome = service.check_login(args.username, password).unwrap()
        if not outcome.login_success:
            raise AuthenticationError(f"Login failed for user: {outcome.user_name}", "Check the username and password")
        return outcome

    return ctx.guard.run("Validating login...", check, LOGIN_SCHEMA)


def cmd_users_reset_password(args, ctx):
    service = UserService(ctx.client)
    return ctx.guard.run(
        "Requesting password reset...",
        lambda: service.reset_password(
            args.find_by,
            args.value,
            email_from_name=args.email_from_name,
            email_from=args.email_from,
            url_pattern=args.url_pattern,
        ),
        RESET_SCHEMA,
    )


def _add_profile_arguments(parser) -> None:
    parser.add_argument("--first-name", required=True, help="First name")
    parser.add_argument("--last-name", required=True, help="Last name")
    parser.add_argument("--email", required=True, help="Email address")
    parser.add_argument("--job-title", help="Job title")
    parser.add_argument("--organization", help="Organization")
    parser.add_argument("--address1", required=True, help="Street address")
    parser.add_argument("--address2", help="Street address, line 2")
    parser.add_argument("--city", required=True, help="City")
    parser.add_argument("--state", dest="state_province", required=True, help="State or province")
    parser.add_argument("--zip", required=True, help="Postal code")
    parser.add_argument("--country", required=True, help="Two-letter country code")
    parser.add_argument("--phone", required=True, help="Phone, e.g. +1.5555555555")
    parser.add_argument("--phone-ext", help="Phone extension")
    parser.add_argument("--fax", help="Fax number")


def register(subparsers, parents):
    """Add the users command group"""
    output, confirm = parents["output"], parents["confirm"]

    group = subparsers.add_parser("users", help="Account balances, pricing, funding and sub-accounts")
    commands = group.add_subparsers(dest="users_command", help="Account operations")
    group.set_defaults(help_parser=group)

    balances_parser = commands.add_parser("balances", parents=[output], help="Show account balances")
    balances_parser.set_defaults(func=cmd_users_balances)

    pricing_parser = commands.add_parser("pricing", parents=[output], help="Show domain pricing")
    pricing_parser.add_argument(
        "--action", default="register", choices=PRICING_ACTIONS, help="Price action (default: register)"
    )
    pricing_parser.add_argument("--tld", help="Only this TLD, e.g. com")
    pricing_parser.add_argument("--years", type=int, default=1, help="Duration in years (default: 1)")
    pricing_parser.set_defaults(func=cmd_users_pricing)

    funds_parser = commands.add_parser("add-funds", parents=[output], help="Start a credit card funding request")
    funds_parser.add_argument("--amount", type=float, required=True, help="Amount to add")
    funds_parser.add_argument("--return-url", required=True, help="URL to return to after payment")
    funds_parser.set_defaults(func=cmd_users_add_funds)

    status_parser = commands.add_parser("funds-status", parents=[output], help="Check a funding request")
    status_parser.add_argument("token_id", help="Token ID from add-funds")
    status_parser.set_defaults(func=cmd_users_funds_status)

    password_parser = commands.add_parser(
        "change-password", parents=[output, confirm], help="Change the account password"
    )
    secret = password_parser.add_mutually_exclusive_group(required=True)
    secret.add_argument("--old-password", help="Current password")
    secret.add_argument("--reset-code", help="Password reset code")
    password_parser.add_argument("--new-password", help="New password (prompted when omitted)")
    password_parser.set_defaults(func=cmd_users_change_password)

    create_parser = commands.add_parser("create", parents=[output], help="Create a sub-account under the API user")
    create_parser.add_argument("--username", required=True, help="Username for the new account")
    create_parser.add_argument("--password", help="Password for the new account (prompted when omitted)")
    _add_profile_arguments(create_parser)
    create_parser.add_argument("--accept-terms", action="store_true", help="Accept the Namecheap terms (required)")
    create_parser.add_argument("--accept-news", action="store_true", help="Receive promotional email")
    create_parser.add_argument(
        "--ignore-duplicate-email", action="store_true", help="Allow an email already used by another account"
    )
    create_parser.set_defaults(func=cmd_users_create)

    update_parser = commands.add_parser("update", parents=[output], help="Update the account holder details")
    _add_profile_arguments(update_parser)
    update_parser.set_defaults(func=cmd_users_update)

    login_parser = commands.add_parser("login", parents=[output], help="Check a sub-account's password")
    login_parser.add_argument("username", help="Username to check")
    login_parser.add_argument("--password", help="Password to check (prompted when omitted)")
    login_parser.set_defaults(func=cmd_users_login)

    reset_parser = commands.add_parser("reset-password", parents=[output], help="Send a password reset email")
    reset_parser.add_argument("--find-by", required=True, choices=tuple(FIND_BY), help="How to find the account")
    reset_parser.add_argument("--value", required=True, help="The email, domain or username to look up")
    reset_parser.add_argument("--email-from-name", help="Sender name in the reset email")
    reset_parser.add_argument("--email-from", help="Sender address in the reset email")
    reset_parser.add_argument("--url-pattern", help="Reset link pattern")
    reset_parser.set_defaults(func=cmd_users_reset_password)
