"""
Typed projections of Namecheap payloads
Every record is validated once here; renderers and commands never re-check shape
"""

from typing import Any, Dict, List, Optional, Type, TypeVar

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError as PydanticValidationError,
    field_validator,
    model_validator,
)

from namecheap_cli.api.exceptions import ProtocolError, ValidationError
from namecheap_cli.api.normalizer import as_list


M = TypeVar("M", bound="WireModel")


class WireModel(BaseModel):
    """Base for records read from the wire: aliases match Namecheap attribute names"""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def drop_empty_values(cls, data: Any) -> Any:
        # Namecheap sends empty attributes and elements for absent values
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v != "" and v is not None}
        return data


def project(model: Type[M], payload: Any) -> M:
    """
    Validate an opaque payload into a typed record.

    Raises:
        ProtocolError: If required fields are missing or malformed
    """
    if not isinstance(payload, dict):
        raise ProtocolError(f"Expected a {model.__name__} record, got {type(payload).__name__}")
    try:
        return model.model_validate(payload)
    except PydanticValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"]) or model.__name__
        raise ProtocolError(f"Unexpected {model.__name__} payload: {location}: {first['msg']}") from e


def project_list(model: Type[M], payload: Any) -> List[M]:
    return [project(model, item) for item in as_list(payload)]


# ============================================================================
# Domains
# ============================================================================

class Domain(WireModel):
    id: int = Field(alias="ID")
    name: str = Field(alias="Name")
    user: Optional[str] = Field(default=None, alias="User")
    created: Optional[str] = Field(default=None, alias="Created")
    expires: Optional[str] = Field(default=None, alias="Expires")
    is_expired: bool = Field(default=False, alias="IsExpired")
    is_locked: bool = Field(default=False, alias="IsLocked")
    auto_renew: bool = Field(default=False, alias="AutoRenew")
    whois_guard: Optional[str] = Field(default=None, alias="WhoisGuard")
    is_premium: bool = Field(default=False, alias="IsPremium")
    is_our_dns: bool = Field(default=False, alias="IsOurDNS")


class DomainInfo(WireModel):
    domain_name: str = Field(alias="DomainName")
    owner_name: Optional[str] = Field(default=None, alias="OwnerName")
    status: Optional[str] = Field(default=None, alias="Status")
    is_owner: bool = Field(default=False, alias="IsOwner")
    is_premium: bool = Field(default=False, alias="IsPremium")
    created_date: Optional[str] = None
    expired_date: Optional[str] = None
    dns_provider_type: str = "Unknown"
    nameservers: List[str] = Field(default_factory=list)
    whoisguard_enabled: bool = False
    whoisguard_id: Optional[str] = None
    whoisguard_expires: Optional[str] = None


class DomainAvailability(WireModel):
    domain: str = Field(alias="Domain")
    available: bool = Field(alias="Available")
    premium: bool = Field(default=False, alias="IsPremiumName")
    premium_price: Optional[float] = Field(default=None, alias="PremiumRegistrationPrice")

    @model_validator(mode="after")
    def price_only_for_premium(self) -> "DomainAvailability":
        if not self.premium:
            self.premium_price = None
        return self


class LockStatus(WireModel):
    domain: str = Field(alias="Domain")
    locked: bool = Field(alias="RegistrarLockStatus")


class RegistrationResult(WireModel):
    domain: str = Field(alias="Domain")
    registered: bool = Field(alias="Registered")
    charged_amount: float = Field(default=0.0, alias="ChargedAmount")
    domain_id: Optional[int] = Field(default=None, alias="DomainID")
    order_id: Optional[int] = Field(default=None, alias="OrderID")
    transaction_id: Optional[int] = Field(default=None, alias="TransactionID")
    whoisguard_enabled: bool = Field(default=False, alias="WhoisguardEnable")
    non_real_time_domain: bool = Field(default=False, alias="NonRealTimeDomain")


class RenewalResult(WireModel):
    domain_name: str = Field(validation_alias=AliasChoices("domain_name", "DomainName", "Domain"))
    domain_id: Optional[int] = Field(default=None, alias="DomainID")
    renewed: bool = Field(validation_alias=AliasChoices("renewed", "Renew", "IsSuccess"))
    charged_amount: float = Field(default=0.0, alias="ChargedAmount")
    order_id: Optional[int] = Field(default=None, alias="OrderID")
    transaction_id: Optional[int] = Field(default=None, alias="TransactionID")
    expire_date: Optional[str] = None


CONTACT_TYPES = ("registrant", "tech", "admin", "aux_billing")

# Parameter prefixes used by domains.create and domains.setContacts
CONTACT_PREFIXES = {
    "registrant": "Registrant",
    "tech": "Tech",
    "admin": "Admin",
    "aux_billing": "AuxBilling",
}


class ContactInfo(WireModel):
    first_name: str = Field(alias="FirstName", min_length=1)
    last_name: str = Field(alias="LastName", min_length=1)
    address1: str = Field(alias="Address1", min_length=1)
    address2: Optional[str] = Field(default=None, alias="Address2")
    city: str = Field(alias="City", min_length=1)
    state_province: str = Field(alias="StateProvince", min_length=1)
    postal_code: str = Field(alias="PostalCode", min_length=1)
    country: str = Field(alias="Country", min_length=1)
    phone: str = Field(alias="Phone", min_length=1)
    phone_ext: Optional[str] = Field(default=None, alias="PhoneExt")
    fax: Optional[str] = Field(default=None, alias="Fax")
    email: str = Field(alias="EmailAddress", min_length=1)
    organization_name: Optional[str] = Field(default=None, alias="OrganizationName")
    job_title: Optional[str] = Field(default=None, alias="JobTitle")

    def to_params(self, prefix: str) -> Dict[str, str]:
        """Contact fields as prefixed request parameters, e.g. RegistrantFirstName"""
        return {
            f"{prefix}{type(self).model_fields[name].alias}": value
            for name, value in self.model_dump().items()
            if value is not None
        }


class DomainContacts(WireModel):
    registrant: ContactInfo = Field(alias="Registrant")
    tech: ContactInfo = Field(alias="Tech")
    admin: ContactInfo = Field(alias="Admin")
    aux_billing: ContactInfo = Field(alias="AuxBilling")

    def to_params(self) -> Dict[str, str]:
        params: Dict[str, str] = {}
        for contact_type in CONTACT_TYPES:
            params.update(getattr(self, contact_type).to_params(CONTACT_PREFIXES[contact_type]))
        return params


def load_contact(data: Any, source: str = "contact") -> ContactInfo:
    """
    Validate user-supplied contact data.

    Raises:
        ValidationError: If required contact fields are missing
    """
    try:
        return ContactInfo.model_validate(data)
    except PydanticValidationError as e:
        # Errors are located by wire alias; report the field names users write
        names = {field.alias: name for name, field in ContactInfo.model_fields.items()}
        missing = sorted({names.get(str(err["loc"][0]), str(err["loc"][0])) for err in e.errors() if err["loc"]})
        raise ValidationError(
            f"Invalid {source}: check {', '.join(missing) or 'fields'}",
            "Required: first_name, last_name, address1, city, state_province, "
            "postal_code, country, phone, email",
        ) from e


# ============================================================================
# DNS
# ============================================================================

class DnsRecord(WireModel):
    host_id: str = Field(alias="HostId")
    name: str = Field(alias="Name")
    type: str = Field(alias="Type")
    address: str = Field(alias="Address")
    mx_pref: Optional[int] = Field(default=None, alias="MXPref")
    ttl: int = Field(default=1800, alias="TTL")
    is_active: bool = Field(default=True, alias="IsActive")
    is_ddns_enabled: Optional[bool] = Field(default=None, alias="IsDDNSEnabled")


class EmailForward(WireModel):
    mailbox: str
    # Sent as a ForwardTo attribute or as the element text
    forward_to: str = Field(validation_alias=AliasChoices("forward_to", "ForwardTo", "#text"))


class NameserverInfo(WireModel):
    domain: str = Field(alias="Domain")
    is_using_our_dns: bool = Field(default=False, alias="IsUsingOurDNS")
    nameservers: List[str] = Field(default_factory=list, alias="Nameserver")

    @field_validator("nameservers", mode="before")
    @classmethod
    def single_or_many(cls, v: Any) -> List[str]:
        return as_list(v)


class ChildNameserver(WireModel):
    nameserver: str = Field(alias="Nameserver")
    ip: str = Field(alias="IP")
    statuses: List[str] = Field(default_factory=list)


# ============================================================================
# Users / account
# ============================================================================

class AccountBalance(WireModel):
    currency: str = Field(default="USD", alias="Currency")
    available_balance: float = Field(alias="AvailableBalance")
    account_balance: float = Field(alias="AccountBalance")
    earned_amount: float = Field(default=0.0, alias="EarnedAmount")
    withdrawable_amount: float = Field(default=0.0, alias="WithdrawableAmount")
    funds_required_for_auto_renew: float = Field(default=0.0, alias="FundsRequiredForAutoRenew")


class PricingEntry(WireModel):
    product_type: str = "DOMAIN"
    product_category: str = ""
    product_name: str = ""
    duration: int = Field(default=1, alias="Duration")
    duration_type: str = Field(default="YEAR", alias="DurationType")
    price: float = Field(default=0.0, alias="Price")
    additional_cost: float = Field(default=0.0, alias="AdditionalCost")
    regular_price: float = Field(default=0.0, alias="RegularPrice")
    your_price: float = Field(default=0.0, alias="YourPrice")
    your_price_type: Optional[str] = Field(default=None, alias="YourPriceType")
    currency: str = Field(default="USD", alias="Currency")


class AddFundsRequest(WireModel):
    token_id: str = Field(alias="TokenId")
    redirect_url: str = Field(alias="RedirectURL")
    return_url: Optional[str] = Field(default=None, alias="ReturnURL")


class AddFundsStatus(WireModel):
    token_id: Optional[str] = None
    transaction_id: Optional[str] = Field(default=None, alias="TransactionId")
    amount: float = Field(default=0.0, alias="Amount")
    status: str = Field(alias="Status")


class PasswordChange(WireModel):
    success: bool = Field(alias="Success")
    user_id: Optional[str] = Field(default=None, alias="UserId")


class UserProfile(WireModel):
    """Account holder details sent by users.create and users.update"""

    first_name: str = Field(alias="FirstName", min_length=1)
    last_name: str = Field(alias="LastName", min_length=1)
    email: str = Field(alias="EmailAddress", min_length=1)
    job_title: Optional[str] = Field(default=None, alias="JobTitle")
    organization: Optional[str] = Field(default=None, alias="Organization")
    address1: str = Field(alias="Address1", min_length=1)
    address2: Optional[str] = Field(default=None, alias="Address2")
    city: str = Field(alias="City", min_length=1)
    state_province: str = Field(alias="StateProvince", min_length=1)
    zip: str = Field(alias="Zip", min_length=1)
    country: str = Field(alias="Country", min_length=1)
    phone: str = Field(alias="Phone", min_length=1)
    phone_ext: Optional[str] = Field(default=None, alias="PhoneExt")
    fax: Optional[str] = Field(default=None, alias="Fax")

    def to_params(self) -> Dict[str, str]:
        return {
            type(self).model_fields[name].alias: value
            for name, value in self.model_dump().items()
            if value is not None
        }


class UserAccountChange(WireModel):
    success: bool = Field(alias="Success")
    user_id: Optional[str] = Field(default=None, alias="UserId")


class LoginCheck(WireModel):
    user_name: str = Field(alias="UserName")
    login_success: bool = Field(alias="LoginSuccess")


class PasswordReset(WireModel):
    success: bool = Field(alias="Success")


# ============================================================================
# WhoisGuard
# ============================================================================

class WhoisGuardEntry(WireModel):
    id: str = Field(alias="ID")
    domain_name: Optional[str] = Field(default=None, alias="DomainName")
    enabled: bool = Field(default=False, alias="Enabled")
    expire_date: Optional[str] = Field(default=None, alias="ExpDate")
    status: Optional[str] = Field(default=None, alias="Status")
    email_hash: Optional[str] = Field(default=None, alias="EmailHash")


class WhoisGuardRenewal(WireModel):
    whoisguard_id: str = Field(alias="WhoisguardId")
    years: int = Field(alias="Years")
    renewed: bool = Field(alias="Renew")
    charged_amount: float = Field(default=0.0, alias="ChargedAmount")
    order_id: Optional[int] = Field(default=None, alias="OrderId")
    transaction_id: Optional[int] = Field(default=None, alias="TransactionId")


# ============================================================================
# Addresses
# ============================================================================

class AddressSummary(WireModel):
    address_id: str = Field(alias="AddressId")
    name: str = Field(default="", alias="AddressName")


class AddressInfo(WireModel):
    address_id: str = Field(alias="AddressId")
    name: str = Field(default="", alias="AddressName")
    is_default: bool = Field(default=False, alias="Default_YN")
    first_name: Optional[str] = Field(default=None, alias="FirstName")
    last_name: Optional[str] = Field(default=None, alias="LastName")
    email: Optional[str] = Field(default=None, alias="EmailAddress")
    job_title: Optional[str] = Field(default=None, alias="JobTitle")
    organization: Optional[str] = Field(default=None, alias="Organization")
    address1: Optional[str] = Field(default=None, alias="Address1")
    address2: Optional[str] = Field(default=None, alias="Address2")
    city: Optional[str] = Field(default=None, alias="City")
    state_province: Optional[str] = Field(default=None, alias="StateProvince")
    state_province_choice: Optional[str] = Field(default=None, alias="StateProvinceChoice")
    zip: Optional[str] = Field(default=None, alias="Zip")
    country: Optional[str] = Field(default=None, alias="Country")
    phone: Optional[str] = Field(default=None, alias="Phone")
    phone_ext: Optional[str] = Field(default=None, alias="PhoneExt")
    fax: Optional[str] = Field(default=None, alias="Fax")


class AddressInput(WireModel):
    """Fields accepted by users.address.create and users.address.update"""

    name: str = Field(alias="AddressName", min_length=1)
    first_name: str = Field(alias="FirstName", min_length=1)
    last_name: str = Field(alias="LastName", min_length=1)
    email: str = Field(alias="EmailAddress", min_length=1)
    address1: str = Field(alias="Address1", min_length=1)
    address2: Optional[str] = Field(default=None, alias="Address2")
    city: str = Field(alias="City", min_length=1)
    state_province: str = Field(alias="StateProvince", min_length=1)
    state_province_choice: str = Field(default="S", alias="StateProvinceChoice")
    zip: str = Field(alias="Zip", min_length=1)
    country: str = Field(alias="Country", min_length=1)
    phone: str = Field(alias="Phone", min_length=1)
    phone_ext: Optional[str] = Field(default=None, alias="PhoneExt")
    fax: Optional[str] = Field(default=None, alias="Fax")
    job_title: Optional[str] = Field(default=None, alias="JobTitle")
    organization: Optional[str] = Field(default=None, alias="Organization")
    default: Optional[bool] = Field(default=None, alias="DefaultYN")

    def to_params(self) -> Dict[str, str]:
        params = {}
        for name, value in self.model_dump().items():
            if value is None:
                continue
            if name == "default":
                value = 1 if value else 0
            params[type(self).model_fields[name].alias] = value
        return params


class AddressChange(WireModel):
    success: bool = Field(alias="Success")
    address_id: Optional[str] = Field(default=None, alias="AddressId")
    address_name: Optional[str] = Field(default=None, alias="AddressName")


# ============================================================================
# Generic acknowledgements
# ============================================================================

class ActionResult(BaseModel):
    """Acknowledgement of a mutation that returns no record of its own"""

    target: str
    action: str
    success: bool = True
    detail: Optional[str] = None
