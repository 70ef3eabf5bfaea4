"""
Address Service
Saved contact addresses of the Namecheap account
"""

from typing import List

from namecheap_cli.api.exceptions import ValidationError
from namecheap_cli.api.models import (
    AddressChange,
    AddressInfo,
    AddressInput,
    AddressSummary,
    project,
    project_list,
)
from namecheap_cli.api.result import returns_result
from namecheap_cli.services.base import BaseService, as_dict


def _check_id(address_id: str) -> str:
    address_id = str(address_id).strip()
    if not address_id.isdigit():
        raise ValidationError(f"Invalid address ID: {address_id}", "Address IDs are numeric")
    return address_id


class AddressService(BaseService):
    """CRUD operations on saved addresses"""

    @returns_result
    def list_addresses(self) -> List[AddressSummary]:
        data = self.client.request("namecheap.users.address.getList")
        return project_list(AddressSummary, as_dict(data.get("AddressGetListResult")).get("List"))

    @returns_result
    def get_info(self, address_id: str) -> AddressInfo:
        data = self.client.request("namecheap.users.address.getInfo", {"AddressId": _check_id(address_id)})
        return project(AddressInfo, self.section(data, "GetAddressInfoResult"))

    @returns_result
    def create(self, address: AddressInput) -> AddressChange:
        data = self.client.request("namecheap.users.address.create", address.to_params())
        return project(AddressChange, self.section(data, "AddressCreateResult"))

    @returns_result
    def update(self, address_id: str, address: AddressInput) -> AddressChange:
        params = dict(address.to_params(), AddressId=_check_id(address_id))
        data = self.client.request("namecheap.users.address.update", params)
        return project(AddressChange, self.section(data, "AddressUpdateResult"))

    @returns_result
    def delete(self, address_id: str) -> AddressChange:
        address_id = _check_id(address_id)
        data = self.client.request("namecheap.users.address.delete", {"AddressId": address_id})
        raw = self.section(data, "AddressDeleteResult")
        return project(AddressChange, dict(raw, AddressId=raw.get("AddressId") or address_id))

    @returns_result
    def set_default(self, address_id: str) -> AddressChange:
        data = self.client.request("namecheap.users.address.setDefault", {"AddressId": _check_id(address_id)})
        return project(AddressChange, self.section(data, "AddressSetDefaultResult"))
