"""
WhoisGuard Service
Privacy-protection subscriptions and their domain assignments
"""

from typing import Optional

from namecheap_cli.api.client import Page, PageCursor
from namecheap_cli.api.exceptions import ValidationError
from namecheap_cli.api.models import (
    ActionResult,
    WhoisGuardEntry,
    WhoisGuardRenewal,
    project,
    project_list,
)
from namecheap_cli.api.result import returns_result
from namecheap_cli.services.base import BaseService, as_dict
from namecheap_cli.utils.validators import validate_domain, validate_email, validate_years

LIST_TYPES = ("ALL", "ALLOTED", "FREE", "DISCARD")

LOOKUP_PAGE_SIZE = 100


class WhoisGuardService(BaseService):
    """
    WhoisGuard subscription operations.

    Commands may name a domain instead of a subscription ID; the lookup
    scans a single page of 100 subscriptions.
    """

    def _page(self, cursor: PageCursor, list_type: str = "ALL") -> Page[WhoisGuardEntry]:
        params = dict(cursor.as_params(), ListType=list_type)
        data = self.client.request("namecheap.whoisguard.getList", params)
        result = as_dict(data.get("WhoisguardGetListResult"))
        items = project_list(WhoisGuardEntry, result.get("Whoisguard"))
        paging_source = result if "Paging" in result else data
        return Page(items=items, cursor=self.paging(paging_source, cursor))

    @returns_result
    def list_subscriptions(self, cursor: Optional[PageCursor] = None, list_type: str = "ALL") -> Page[WhoisGuardEntry]:
        list_type = list_type.upper()
        if list_type not in LIST_TYPES:
            raise ValidationError(f"Invalid list type: {list_type}", f"Use one of: {', '.join(LIST_TYPES)}")
        return self._page(cursor or PageCursor(), list_type)

    def resolve_id(self, target: str) -> str:
        """
        Turn a domain name or numeric ID into a subscription ID.

        Raises:
            ValidationError: If no subscription is assigned to the domain
        """
        if target.isdigit():
            return target
        domain = validate_domain(target)
        page = self._page(PageCursor(page=1, page_size=LOOKUP_PAGE_SIZE))
        for entry in page.items:
            if (entry.domain_name or "").lower() == domain:
                return entry.id
        raise ValidationError(
            f"No WhoisGuard subscription found for {domain}",
            'List subscriptions with "namecheap whoisguard list"',
        )

    @returns_result
    def enable(self, target: str, forward_to: str) -> ActionResult:
        forward_to = validate_email(forward_to)
        whoisguard_id = self.resolve_id(target)
        self.client.request("namecheap.whoisguard.enable", {
            "WhoisguardID": whoisguard_id,
            "ForwardedToEmail": forward_to,
        })
        return ActionResult(target=target, action="whoisguard enabled", detail=f"forwarding to {forward_to}")

    @returns_result
    def disable(self, target: str) -> ActionResult:
        whoisguard_id = self.resolve_id(target)
        self.client.request("namecheap.whoisguard.disable", {"WhoisguardID": whoisguard_id})
        return ActionResult(target=target, action="whoisguard disabled")

    @returns_result
    def allot(self, whoisguard_id: str, domain: str) -> ActionResult:
        domain = validate_domain(domain)
        if not whoisguard_id.isdigit():
            raise ValidationError(f"Invalid WhoisGuard ID: {whoisguard_id}")
        self.client.request("namecheap.whoisguard.allot", {
            "WhoisguardId": whoisguard_id,
            "DomainName": domain,
        })
        return ActionResult(target=domain, action="whoisguard allotted", detail=f"subscription {whoisguard_id}")

    @returns_result
    def unallot(self, target: str) -> ActionResult:
        whoisguard_id = self.resolve_id(target)
        self.client.request("namecheap.whoisguard.unallot", {"WhoisguardId": whoisguard_id})
        return ActionResult(target=target, action="whoisguard unallotted", detail=f"subscription {whoisguard_id}")

    @returns_result
    def renew(self, target: str, years: int = 1, promo_code: Optional[str] = None) -> WhoisGuardRenewal:
        whoisguard_id = self.resolve_id(target)
        data = self.client.request("namecheap.whoisguard.renew", {
            "WhoisguardId": whoisguard_id,
            "Years": validate_years(years),
            "PromotionCode": promo_code,
        })
        return project(WhoisGuardRenewal, self.section(data, "WhoisguardRenewResult"))
