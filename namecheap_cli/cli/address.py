"""
address command group
"""

from typing import Any, Dict

from pydantic import ValidationError as PydanticValidationError

from namecheap_cli.api.exceptions import ValidationError
from namecheap_cli.api.models import AddressInput
from namecheap_cli.output.formatters import badge_style, yes_no
from namecheap_cli.output.renderer import Column, Schema
from namecheap_cli.services import AddressService


ADDRESS_LIST_SCHEMA = Schema(
    columns=[
        Column("ID", "address_id"),
        Column("Name", "name"),
    ],
    empty_message="No addresses found.",
    noun="address",
)

ADDRESS_INFO_SCHEMA = Schema(columns=[
    Column("ID", "address_id"),
    Column("Name", "name"),
    Column("Default", "is_default", format=yes_no, style=badge_style),
    Column("Contact", getter=lambda a: " ".join(p for p in (a.first_name, a.last_name) if p)),
    Column("Email", "email"),
    Column("Organization", "organization"),
    Column("Job Title", "job_title"),
    Column("Address", getter=lambda a: ", ".join(p for p in (a.address1, a.address2) if p)),
    Column("City", "city"),
    Column("State/Province", "state_province"),
    Column("Zip", "zip"),
    Column("Country", "country"),
    Column("Phone", getter=lambda a: f"{a.phone} x{a.phone_ext}" if a.phone and a.phone_ext else a.phone),
    Column("Fax", "fax"),
])

CHANGE_SCHEMA = Schema(columns=[
    Column("Success", "success", format=yes_no, style=badge_style),
    Column("Address ID", "address_id"),
    Column("Name", "address_name"),
])

# argparse destination -> AddressInput field
ADDRESS_FIELDS = (
    "name", "first_name", "last_name", "email", "address1", "address2", "city",
    "state_province", "state_province_choice", "zip", "country", "phone",
    "phone_ext", "fax", "job_title", "organization", "default",
)


def address_input(values: Dict[str, Any]) -> AddressInput:
    try:
        return AddressInput(**{k: v for k, v in values.items() if v is not None})
    except PydanticValidationError as e:
        names = {field.alias: name for name, field in AddressInput.model_fields.items()}
        fields = sorted({names.get(str(err["loc"][0]), str(err["loc"][0])) for err in e.errors() if err["loc"]})
        raise ValidationError(
            f"Invalid address: check {', '.join(fields)}",
            "Required: --name, --first-name, --last-name, --email, --address1, --city, "
            "--state, --zip, --country, --phone",
        ) from e


def _values(args) -> Dict[str, Any]:
    return {name: getattr(args, name, None) for name in ADDRESS_FIELDS}


def cmd_address_list(args, ctx):
    service = AddressService(ctx.client)
    return ctx.guard.run("Fetching addresses...", service.list_addresses, ADDRESS_LIST_SCHEMA)


def cmd_address_info(args, ctx):
    service = AddressService(ctx.client)
    return ctx.guard.run("Fetching address...", lambda: service.get_info(args.address_id), ADDRESS_INFO_SCHEMA)


def cmd_address_create(args, ctx):
    service = AddressService(ctx.client)
    return ctx.guard.run(
        "Creating address...",
        lambda: service.create(address_input(_values(args))),
        CHANGE_SCHEMA,
    )


def cmd_address_update(args, ctx):
    """Update an address; fields not given keep their current values"""
    service = AddressService(ctx.client)

    def update():
        current = service.get_info(args.address_id).unwrap()
        values = current.model_dump(exclude={"address_id", "is_default"})
        values.update({k: v for k, v in _values(args).items() if v is not None})
        return service.update(args.address_id, address_input(values))

    return ctx.guard.run("Updating address...", update, CHANGE_SCHEMA)


def cmd_address_delete(args, ctx):
    service = AddressService(ctx.client)
    return ctx.guard.run(
        "Deleting address...",
        lambda: service.delete(args.address_id),
        CHANGE_SCHEMA,
        confirm=f"Delete address {args.address_id}?",
    )


def cmd_address_set_default(args, ctx):
    service = AddressService(ctx.client)
    return ctx.guard.run("Setting default address...", lambda: service.set_default(args.address_id), CHANGE_SCHEMA)


def _add_address_arguments(parser, required: bool) -> None:
    parser.add_argument("--name", required=required, help="Address name")
    parser.add_argument("--first-name", required=required, help="First name")
    parser.add_argument("--last-name", required=required, help="Last name")
    parser.add_argument("--email", required=required, help="Email address")
    parser.add_argument("--address1", required=required, help="Street address")
    parser.add_argument("--address2", help="Street address, line 2")
    parser.add_argument("--city", required=required, help="City")
    parser.add_argument("--state", dest="state_province", required=required, help="State or province")
    parser.add_argument("--state-choice", dest="state_province_choice", help="State/province choice (S or P)")
    parser.add_argument("--zip", required=required, help="Postal code")
    parser.add_argument("--country", required=required, help="Two-letter country code")
    parser.add_argument("--phone", required=required, help="Phone, e.g. +1.5555555555")
    parser.add_argument("--phone-ext", help="Phone extension")
    parser.add_argument("--fax", help="Fax number")
    parser.add_argument("--job-title", help="Job title")
    parser.add_argument("--organization", help="Organization")
    parser.add_argument("--default", action="store_true", default=None, help="Make this the default address")


def register(subparsers, parents):
    """Add the address command group"""
    output, confirm = parents["output"], parents["confirm"]

    group = subparsers.add_parser("address", help="Saved address management")
    commands = group.add_subparsers(dest="address_command", help="Address operations")
    group.set_defaults(help_parser=group)

    list_parser = commands.add_parser("list", parents=[output], help="List saved addresses")
    list_parser.set_defaults(func=cmd_address_list)

    info_parser = commands.add_parser("info", parents=[output], help="Show address details")
    info_parser.add_argument("address_id", help="Address ID")
    info_parser.set_defaults(func=cmd_address_info)

    create_parser = commands.add_parser("create", parents=[output], help="Create an address")
    _add_address_arguments(create_parser, required=True)
    create_parser.set_defaults(func=cmd_address_create)

    update_parser = commands.add_parser("update", parents=[output], help="Update an address")
    update_parser.add_argument("address_id", help="Address ID")
    _add_address_arguments(update_parser, required=False)
    update_parser.set_defaults(func=cmd_address_update)

    delete_parser = commands.add_parser("delete", parents=[output, confirm], help="Delete an address")
    delete_parser.add_argument("address_id", help="Address ID")
    delete_parser.set_defaults(func=cmd_address_delete)

    default_parser = commands.add_parser("set-default", parents=[output], help="Set the default address")
    default_parser.add_argument("address_id", help="Address ID")
    default_parser.set_defaults(func=cmd_address_set_default)
