"""
Nameserver Service
Child nameservers (glue records) registered under a domain
"""

from namecheap_cli.api.models import ActionResult, ChildNameserver, project
from namecheap_cli.api.normalizer import as_list
from namecheap_cli.api.result import returns_result
from namecheap_cli.services.base import BaseService, as_dict
from namecheap_cli.utils.validators import split_domain, validate_domain, validate_ip


class NameserverService(BaseService):
    """Create, inspect, update and delete child nameservers"""

    def _params(self, domain: str, nameserver: str) -> dict:
        sld, tld = split_domain(domain)
        return {"SLD": sld, "TLD": tld, "Nameserver": validate_domain(nameserver)}

    @returns_result
    def create(self, domain: str, nameserver: str, ip: str) -> ActionResult:
        params = dict(self._params(domain, nameserver), IP=validate_ip(ip))
        self.client.request("namecheap.domains.ns.create", params)
        return ActionResult(target=params["Nameserver"], action="nameserver created", detail=params["IP"])

    @returns_result
    def delete(self, domain: str, nameserver: str) -> ActionResult:
        params = self._params(domain, nameserver)
        self.client.request("namecheap.domains.ns.delete", params)
        return ActionResult(target=params["Nameserver"], action="nameserver deleted")

    @returns_result
    def get_info(self, domain: str, nameserver: str) -> ChildNameserver:
        params = self._params(domain, nameserver)
        data = self.client.request("namecheap.domains.ns.getInfo", params)
        raw = self.section(data, "DomainNSInfoResult")
        statuses = as_list(as_dict(raw.get("NameserverStatuses")).get("Status"))
        return project(ChildNameserver, dict(
            raw,
            Nameserver=raw.get("Nameserver") or params["Nameserver"],
            statuses=statuses,
        ))

    @returns_result
    def update(self, domain: str, nameserver: str, old_ip: str, new_ip: str) -> ActionResult:
        params = dict(
            self._params(domain, nameserver),
            OldIP=validate_ip(old_ip),
            IP=validate_ip(new_ip),
        )
        self.client.request("namecheap.domains.ns.update", params)
        return ActionResult(
            target=params["Nameserver"],
            action="nameserver updated",
            detail=f"{params['OldIP']} -> {params['IP']}",
        )
