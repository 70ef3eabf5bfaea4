"""
Domain Service
Registration, renewal, lookup and registrar-lock operations
"""

from typing import Dict, List, Optional, Sequence

from namecheap_cli.api.client import Page, PageCursor
from namecheap_cli.api.exceptions import ValidationError
from namecheap_cli.api.models import (
    CONTACT_TYPES,
    ActionResult,
    ContactInfo,
    Domain,
    DomainAvailability,
    DomainContacts,
    DomainInfo,
    LockStatus,
    RegistrationResult,
    RenewalResult,
    project,
    project_list,
)
from namecheap_cli.api.normalizer import as_list
from namecheap_cli.api.result import returns_result
from namecheap_cli.services.base import BaseService, as_dict
from namecheap_cli.utils.logger import get_logger
from namecheap_cli.utils.validators import validate_domain, validate_nameservers, validate_years

logger = get_logger(__name__)

LIST_TYPES = ("ALL", "EXPIRING", "EXPIRED")

# Namecheap accepts at most this many names in one domains.check call
MAX_CHECK_DOMAINS = 50


class DomainService(BaseService):
    """
    High-level domain operations.
    Each public method returns a Result carrying a typed record.
    """

    @returns_result
    def list_domains(
        self,
        cursor: Optional[PageCursor] = None,
        search: Optional[str] = None,
        list_type: str = "ALL",
    ) -> Page[Domain]:
        """
        Fetch one page of the account's domains.

        Args:
            cursor: Page to fetch (first page of 20 by default)
            search: Optional keyword filter
            list_type: ALL, EXPIRING or EXPIRED

        Returns:
            Page of Domain records with the server's paging totals
        """
        cursor = cursor or PageCursor()
        list_type = list_type.upper()
        if list_type not in LIST_TYPES:
            raise ValidationError(f"Invalid list type: {list_type}", f"Use one of: {', '.join(LIST_TYPES)}")

        params = dict(cursor.as_params(), ListType=list_type, SearchTerm=search)
        data = self.client.request("namecheap.domains.getList", params)

        items = project_list(Domain, as_dict(data.get("DomainGetListResult")).get("Domain"))
        logger.info(f"Fetched {len(items)} domain(s)")
        return Page(items=items, cursor=self.paging(data, cursor))

    @returns_result
    def get_info(self, domain: str) -> DomainInfo:
        domain = validate_domain(domain)
        data = self.client.request("namecheap.domains.getInfo", {"DomainName": domain})
        raw = self.section(data, "DomainGetInfoResult")

        details = as_dict(raw.get("DomainDetails"))
        whoisguard = as_dict(raw.get("Whoisguard"))
        dns = as_dict(raw.get("DnsDetails"))

        payload = dict(raw)
        payload.update({
            "created_date": details.get("CreatedDate"),
            "expired_date": details.get("ExpiredDate"),
            "dns_provider_type": dns.get("ProviderType") or "Unknown",
            "nameservers": as_list(dns.get("Nameserver")),
            "whoisguard_enabled": whoisguard.get("Enabled", False),
            "whoisguard_id": whoisguard.get("ID"),
            "whoisguard_expires": whoisguard.get("ExpiredDate"),
        })
        return project(DomainInfo, payload)

    @returns_result
    def check(self, domains: Sequence[str]) -> List[DomainAvailability]:
        """
        Check availability of one or more names in a single request.

        Args:
            domains: Domain names to check

        Returns:
            One DomainAvailability per name, in server order
        """
        names = [validate_domain(d) for d in domains]
        if not names:
            raise ValidationError("At least one domain is required")
        if len(names) > MAX_CHECK_DOMAINS:
            raise ValidationError(f"At most {MAX_CHECK_DOMAINS} domains can be checked at once")

        data = self.client.request("namecheap.domains.check", {"DomainList": ",".join(names)})
        return project_list(DomainAvailability, data.get("DomainCheckResult"))

    @returns_result
    def get_lock(self, domain: str) -> LockStatus:
        domain = validate_domain(domain)
        data = self.client.request("namecheap.domains.getRegistrarLock", {"DomainName": domain})
        raw = self.section(data, "DomainGetRegistrarLockResult")
        return project(LockStatus, dict(raw, Domain=raw.get("Domain") or domain))

    @returns_result
    def set_lock(self, domain: str, locked: bool) -> ActionResult:
        domain = validate_domain(domain)
        self.client.request(
            "namecheap.domains.setRegistrarLock",
            {"DomainName": domain, "LockAction": "LOCK" if locked else "UNLOCK"},
        )
        action = "locked" if locked else "unlocked"
        logger.info(f"{domain} {action}")
        return ActionResult(target=domain, action=action)

    def registration_params(
        self,
        domain: str,
        contacts: DomainContacts,
        years: int = 1,
        nameservers: Optional[Sequence[str]] = None,
        whoisguard: bool = True,
        promo_code: Optional[str] = None,
    ) -> Dict[str, object]:
        """Parameters for namecheap.domains.create, exposed for --dry-run"""
        params: Dict[str, object] = {
            "DomainName": validate_domain(domain),
            "Years": validate_years(years),
            "AddFreeWhoisguard": "yes" if whoisguard else "no",
            "WGEnabled": "yes" if whoisguard else "no",
            "PromotionCode": promo_code,
        }
        if nameservers:
            params["Nameservers"] = ",".join(validate_nameservers(nameservers))
        params.update(contacts.to_params())
        return params

    @returns_result
    def register(
        self,
        domain: str,
        contacts: DomainContacts,
        years: int = 1,
        nameservers: Optional[Sequence[str]] = None,
        whoisguard: bool = True,
        promo_code: Optional[str] = None,
    ) -> RegistrationResult:
        params = self.registration_params(domain, contacts, years, nameservers, whoisguard, promo_code)
        data = self.client.request("namecheap.domains.create", params)
        result = project(RegistrationResult, self.section(data, "DomainCreateResult"))
        logger.info(f"Registered {result.domain}: charged {result.charged_amount:.2f}")
        return result

    @returns_result
    def renew(self, domain: str, years: int = 1, promo_code: Optional[str] = None) -> RenewalResult:
        domain = validate_domain(domain)
        data = self.client.request(
            "namecheap.domains.renew",
            {"DomainName": domain, "Years": validate_years(years), "PromotionCode": promo_code},
        )
        raw = self.section(data, "DomainRenewResult")
        expires = as_dict(raw.get("DomainDetails")).get("ExpiredDate")
        return project(RenewalResult, dict(raw, expire_date=expires))

    @returns_result
    def reactivate(self, domain: str, years: int = 1, promo_code: Optional[str] = None) -> RenewalResult:
        domain = validate_domain(domain)
        data = self.client.request(
            "namecheap.domains.reactivate",
            {"DomainName": domain, "Years": validate_years(years), "PromotionCode": promo_code},
        )
        return project(RenewalResult, self.section(data, "DomainReactivateResult"))

    def _contacts(self, domain: str) -> DomainContacts:
        data = self.client.request("namecheap.domains.getContacts", {"DomainName": domain})
        return project(DomainContacts, self.section(data, "DomainContactsResult"))

    @returns_result
    def get_contacts(self, domain: str) -> DomainContacts:
        return self._contacts(validate_domain(domain))

    @returns_result
    def set_contacts(self, domain: str, contacts: Dict[str, ContactInfo]) -> ActionResult:
        """
        Replace some or all of a domain's contacts.

        Contact types not supplied keep their current values, since
        domains.setContacts requires all four.

        Args:
            domain: Domain name
            contacts: Mapping of contact type (registrant, tech, admin,
                aux_billing) to the new contact
        """
        domain = validate_domain(domain)
        unknown = set(contacts) - set(CONTACT_TYPES)
        if unknown:
            raise ValidationError(
                f"Unknown contact type: {', '.join(sorted(unknown))}",
                f"Valid types: {', '.join(CONTACT_TYPES)}",
            )
        if not contacts:
            raise ValidationError("No contacts supplied")

        merged = self._contacts(domain).model_copy(update=dict(contacts))
        self.client.request("namecheap.domains.setContacts", dict(merged.to_params(), DomainName=domain))
        return ActionResult(
            target=domain,
            action="contacts updated",
            detail=", ".join(t for t in CONTACT_TYPES if t in contacts),
        )
