"""
DNS Service
Host records, nameserver selection and email forwarding for Namecheap domains
"""

from typing import Any, Dict, List, Optional, Sequence

from namecheap_cli.api.exceptions import ValidationError
from namecheap_cli.api.models import (
    ActionResult,
    DnsRecord,
    EmailForward,
    NameserverInfo,
    project,
    project_list,
)
from namecheap_cli.api.result import returns_result
from namecheap_cli.services.base import BaseService, as_dict
from namecheap_cli.utils.logger import get_logger
from namecheap_cli.utils.validators import (
    split_domain,
    validate_domain,
    validate_email,
    validate_nameservers,
    validate_record_type,
)

logger = get_logger(__name__)

DEFAULT_TTL = 1800
MIN_TTL = 60
MAX_TTL = 60000


def _record_params(records: Sequence[Dict[str, Any]]) -> Dict[str, Any]:
    """Numbered HostNameN/RecordTypeN/AddressN/TTLN/MXPrefN parameters"""
    params: Dict[str, Any] = {}
    for i, record in enumerate(records, start=1):
        params[f"HostName{i}"] = record["name"]
        params[f"RecordType{i}"] = record["type"]
        params[f"Address{i}"] = record["address"]
        params[f"TTL{i}"] = record.get("ttl") or DEFAULT_TTL
        if record["type"] == "MX" and record.get("mx_pref") is not None:
            params[f"MXPref{i}"] = record["mx_pref"]
    return params


def _validate_ttl(ttl: Optional[int]) -> Optional[int]:
    if ttl is not None and not MIN_TTL <= ttl <= MAX_TTL:
        raise ValidationError(f"TTL must be between {MIN_TTL} and {MAX_TTL} seconds")
    return ttl


class DnsService(BaseService):
    """
    DNS operations.

    Namecheap only supports replacing the whole host list, so every record
    mutation reads the current records, edits them locally and writes the
    complete list back with domains.dns.setHosts.
    """

    def _hosts(self, domain: str) -> List[DnsRecord]:
        sld, tld = split_domain(domain)
        data = self.client.request("namecheap.domains.dns.getHosts", {"SLD": sld, "TLD": tld})
        return project_list(DnsRecord, as_dict(data.get("DomainDNSGetHostsResult")).get("host"))

    def _write_hosts(self, domain: str, records: Sequence[Dict[str, Any]]) -> None:
        sld, tld = split_domain(domain)
        params = dict(_record_params(records), SLD=sld, TLD=tld)
        self.client.post("namecheap.domains.dns.setHosts", params)
        logger.info(f"Wrote {len(records)} host record(s) for {domain}")

    @staticmethod
    def _editable(record: DnsRecord) -> Dict[str, Any]:
        return {
            "name": record.name,
            "type": record.type,
            "address": record.address,
            "ttl": record.ttl,
            "mx_pref": record.mx_pref,
        }

    @returns_result
    def list_records(self, domain: str) -> List[DnsRecord]:
        return self._hosts(validate_domain(domain))

    @returns_result
    def add_record(
        self,
        domain: str,
        name: str,
        record_type: str,
        address: str,
        ttl: Optional[int] = None,
        mx_pref: Optional[int] = None,
    ) -> ActionResult:
        """
        Add a host record, keeping all existing ones.

        Args:
            domain: Domain name
            name: Host name ('@' for the apex)
            record_type: Record type, e.g. A, CNAME, MX
            address: Record value
            ttl: TTL in seconds (1800 by default)
            mx_pref: MX preference, MX records only
        """
        domain = validate_domain(domain)
        record_type = validate_record_type(record_type)
        if not name or not address:
            raise ValidationError("Host name and address are required")
        ttl = _validate_ttl(ttl)
        if record_type == "MX" and mx_pref is None:
            mx_pref = 10

        records = [self._editable(r) for r in self._hosts(domain)]
        records.append({
            "name": name,
            "type": record_type,
            "address": address,
            "ttl": ttl,
            "mx_pref": mx_pref,
        })
        self._write_hosts(domain, records)
        return ActionResult(target=domain, action="record added", detail=f"{name} {record_type} {address}")

    @returns_result
    def update_record(
        self,
        domain: str,
        host_id: str,
        name: Optional[str] = None,
        record_type: Optional[str] = None,
        address: Optional[str] = None,
        ttl: Optional[int] = None,
        mx_pref: Optional[int] = None,
    ) -> ActionResult:
        domain = validate_domain(domain)
        updates = {
            "name": name,
            "type": validate_record_type(record_type) if record_type else None,
            "address": address,
            "ttl": _validate_ttl(ttl),
            "mx_pref": mx_pref,
        }
        updates = {k: v for k, v in updates.items() if v is not None}
        if not updates:
            raise ValidationError("Nothing to update", "Pass at least one of --name, --type, --address, --ttl, --mx-pref")

        existing = self._hosts(domain)
        if not any(r.host_id == host_id for r in existing):
            raise ValidationError(
                f"Record with ID {host_id} not found",
                f'List record IDs with "namecheap dns list {domain}"',
            )

        records = []
        for record in existing:
            editable = self._editable(record)
            if record.host_id == host_id:
                editable.update(updates)
            records.append(editable)

        self._write_hosts(domain, records)
        return ActionResult(target=domain, action="record updated", detail=f"host id {host_id}")

    @returns_result
    def remove_record(self, domain: str, host_id: str) -> ActionResult:
        domain = validate_domain(domain)
        existing = self._hosts(domain)
        remaining = [self._editable(r) for r in existing if r.host_id != host_id]
        if len(remaining) == len(existing):
            raise ValidationError(
                f"Record with ID {host_id} not found",
                f'List record IDs with "namecheap dns list {domain}"',
            )

        self._write_hosts(domain, remaining)
        return ActionResult(target=domain, action="record removed", detail=f"host id {host_id}")

    # ------------------------------------------------------------------
    # Nameservers
    # ------------------------------------------------------------------

    @returns_result
    def get_nameservers(self, domain: str) -> NameserverInfo:
        domain = validate_domain(domain)
        sld, tld = split_domain(domain)
        data = self.client.request("namecheap.domains.dns.getList", {"SLD": sld, "TLD": tld})
        raw = self.section(data, "DomainDNSGetListResult")
        return project(NameserverInfo, dict(raw, Domain=raw.get("Domain") or domain))

    @returns_result
    def set_custom_nameservers(self, domain: str, nameservers: Sequence[str]) -> ActionResult:
        domain = validate_domain(domain)
        cleaned = validate_nameservers(nameservers)
        sld, tld = split_domain(domain)
        self.client.request(
            "namecheap.domains.dns.setCustom",
            {"SLD": sld, "TLD": tld, "Nameservers": ",".join(cleaned)},
        )
        return ActionResult(target=domain, action="nameservers set", detail=", ".join(cleaned))

    @returns_result
    def set_default_nameservers(self, domain: str) -> ActionResult:
        domain = validate_domain(domain)
        sld, tld = split_domain(domain)
        self.client.request("namecheap.domains.dns.setDefault", {"SLD": sld, "TLD": tld})
        return ActionResult(target=domain, action="nameservers reset", detail="Namecheap BasicDNS")

    # ------------------------------------------------------------------
    # Email forwarding
    # ------------------------------------------------------------------

    def _forwards(self, domain: str) -> List[EmailForward]:
        data = self.client.request("namecheap.domains.dns.getEmailForwarding", {"DomainName": domain})
        return project_list(EmailForward, as_dict(data.get("DomainDNSGetEmailForwardingResult")).get("Forward"))

    def _write_forwards(self, domain: str, forwards: Sequence[EmailForward]) -> None:
        params: Dict[str, Any] = {"DomainName": domain}
        for i, forward in enumerate(forwards, start=1):
            params[f"MailBox{i}"] = forward.mailbox
            params[f"ForwardTo{i}"] = forward.forward_to
        self.client.request("namecheap.domains.dns.setEmailForwarding", params)

    @returns_result
    def list_forwards(self, domain: str) -> List[EmailForward]:
        return self._forwards(validate_domain(domain))

    @returns_result
    def add_forward(self, domain: str, mailbox: str, forward_to: str) -> ActionResult:
        domain = validate_domain(domain)
        forward_to = validate_email(forward_to)
        mailbox = (mailbox or "").strip()
        if not mailbox:
            raise ValidationError("Mailbox is required")

        forwards = self._forwards(domain)
        if any(f.mailbox.lower() == mailbox.lower() for f in forwards):
            raise ValidationError(f'Email forward for "{mailbox}" already exists')

        forwards.append(EmailForward(mailbox=mailbox, forward_to=forward_to))
        self._write_forwards(domain, forwards)
        return ActionResult(target=domain, action="forward added", detail=f"{mailbox}@{domain} -> {forward_to}")

    @returns_result
    def remove_forward(self, domain: str, mailbox: str) -> ActionResult:
        domain = validate_domain(domain)
        forwards = self._forwards(domain)
        remaining = [f for f in forwards if f.mailbox.lower() != mailbox.lower()]
        if len(remaining) == len(forwards):
            raise ValidationError(f'Email forward for "{mailbox}" not found')

        self._write_forwards(domain, remaining)
        return ActionResult(target=domain, action="forward removed", detail=f"{mailbox}@{domain}")
