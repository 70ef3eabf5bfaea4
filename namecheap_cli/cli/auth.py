"""
auth command group
"""

from pydantic import ValidationError as PydanticValidationError

from namecheap_cli.api.client import NamecheapClient
from namecheap_cli.api.exceptions import AuthenticationError, NamecheapError, ValidationError
from namecheap_cli.api.models import ActionResult
from namecheap_cli.output.formatters import format_currency, yes_no
from namecheap_cli.output.renderer import Column, Schema
from namecheap_cli.services import UserService
from namecheap_cli.utils.config import Credentials
from namecheap_cli.utils.logger import get_logger

logger = get_logger(__name__)


ACTION_SCHEMA = Schema(columns=[
    Column("Account", "target"),
    Column("Result", "action"),
    Column("Details", "detail"),
])

STATUS_SCHEMA = Schema(columns=[
    Column("API User", "api_user"),
    Column("Username", "user_name"),
    Column("Client IP", "client_ip"),
    Column("API Key", "api_key"),
    Column("Environment", "sandbox", format=lambda v: "sandbox" if v else "production"),
    Column("Config File", "config_path", truncate=False),
    Column("Connected", "connected", format=yes_no),
    Column("Balance", getter=lambda s: format_currency(s["available_balance"], s["currency"] or "USD")
           if s["available_balance"] is not None else None),
    Column("API Status", "api_status"),
])


def _credentials(args, ctx) -> Credentials:
    """Collect credentials from flags, prompting for anything missing"""
    prompter = ctx.guard.prompter
    api_user = args.api_user or prompter.text("API user")
    api_key = args.api_key or prompter.text("API key", password=True)
    user_name = args.user_name or api_user
    client_ip = args.client_ip or prompter.text("Whitelisted client IP")

    try:
        return Credentials(
            api_user=api_user,
            api_key=api_key,
            user_name=user_name,
            client_ip=client_ip,
            sandbox=args.sandbox or ctx.store.is_sandbox(),
        )
    except PydanticValidationError as e:
        error = e.errors()[0]
        field = error["loc"][0] if error["loc"] else "credentials"
        raise ValidationError(f"Invalid {field}: {error['msg']}") from e


def cmd_auth_login(args, ctx):
    """Verify credentials against the API, then store them"""

    try:
        credentials = _credentials(args, ctx)
    except ValidationError as e:
        return ctx.guard.fail(e)

    def login():
        detail = "sandbox" if credentials.sandbox else "production"

        if not args.no_verify:
            client = NamecheapClient(credentials=credentials, settings=ctx.settings)
            balance = UserService(client).balances()
            detail += f", balance {format_currency(balance.available_balance, balance.currency)}"

        ctx.store.save(credentials)
        logger.info(f"Stored credentials for {credentials.api_user} in {ctx.store.path}")
        return ActionResult(target=credentials.api_user, action="logged in", detail=detail)

    return ctx.guard.run("Verifying credentials...", login, ACTION_SCHEMA)


def cmd_auth_logout(args, ctx):
    def logout():
        if not ctx.store.clear():
            return ActionResult(target=str(ctx.store.path), action="no stored credentials", success=False)
        return ActionResult(target=str(ctx.store.path), action="logged out")

    return ctx.guard.run(
        "Removing credentials...",
        logout,
        ACTION_SCHEMA,
        confirm="Remove stored credentials?",
    )


def cmd_auth_status(args, ctx):
    """Show the configured account and whether the API accepts it"""

    def status():
        credentials = ctx.store.load()
        if credentials is None:
            raise AuthenticationError()

        info = dict(
            credentials.masked(),
            sandbox=credentials.sandbox,
            config_path=str(ctx.store.path),
            connected=False,
            available_balance=None,
            currency=None,
            api_status=None,
        )
        try:
            balance = UserService(ctx.client).balances()
        except NamecheapError as e:
            info["api_status"] = e.message
        else:
            info.update(connected=True, available_balance=balance.available_balance, currency=balance.currency)
        return info

    return ctx.guard.run("Checking credentials...", status, STATUS_SCHEMA)


def register(subparsers, parents):
    """Add the auth command group"""
    output, confirm = parents["output"], parents["confirm"]

    group = subparsers.add_parser("auth", help="Manage API credentials")
    commands = group.add_subparsers(dest="auth_command", help="Authentication operations")
    group.set_defaults(help_parser=group)

    login_parser = commands.add_parser("login", parents=[output], help="Store API credentials")
    login_parser.add_argument("--api-user", help="API user (prompted when omitted)")
    login_parser.add_argument("--api-key", help="API key (prompted when omitted)")
    login_parser.add_argument("--user-name", help="Account username (default: API user)")
    login_parser.add_argument("--client-ip", help="Whitelisted IPv4 address")
    login_parser.add_argument("--sandbox", action="store_true", help="Use the sandbox environment")
    login_parser.add_argument("--no-verify", action="store_true", help="Store without calling the API")
    login_parser.set_defaults(func=cmd_auth_login)

    logout_parser = commands.add_parser("logout", parents=[output, confirm], help="Remove stored credentials")
    logout_parser.set_defaults(func=cmd_auth_logout)

    status_parser = commands.add_parser("status", parents=[output], help="Show the configured account")
    status_parser.set_defaults(func=cmd_auth_status)
