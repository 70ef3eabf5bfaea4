"""
Input validation utilities for domains, emails, IPs and DNS records
All failures are raised before any request is sent
"""

import ipaddress
import re
from typing import List, Sequence, Tuple

from namecheap_cli.api.exceptions import ValidationError


RECORD_TYPES = (
    "A", "AAAA", "CNAME", "MX", "TXT", "NS", "SRV", "CAA", "ALIAS", "URL", "URL301", "FRAME",
)

# Public suffixes made of two labels that Namecheap sells as a single TLD
COMPOUND_SUFFIXES = frozenset({
    "co.uk", "org.uk", "me.uk", "ltd.uk", "plc.uk", "net.uk",
    "com.au", "net.au", "org.au",
    "co.nz", "net.nz", "org.nz",
    "com.br", "com.mx", "com.co", "net.co", "nom.co",
    "co.in", "net.in", "org.in", "firm.in", "gen.in", "ind.in",
    "com.cn", "net.cn", "org.cn",
    "com.tw", "org.tw", "idv.tw",
    "com.es", "nom.es", "org.es",
    "com.pe", "net.pe", "org.pe",
    "com.sg", "com.vc", "com.ag", "net.ag", "org.ag", "com.sc", "net.sc", "org.sc",
    "com.bz", "net.bz", "co.com",
})

# Labels of 1-63 chars, no leading or trailing hyphen, alphabetic TLD
HOSTNAME_PATTERN = re.compile(r"^(?:[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?\.)+[a-z]{2,63}$")
EMAIL_PATTERN = re.compile(r"^[\w.%+-]+@[a-z0-9.-]+\.[a-z]{2,}$")

MAX_HOSTNAME_LENGTH = 253


def _clean_hostname(value: str) -> str:
    value = value.strip().lower()
    if value.startswith(("http://", "https://")):
        value = value.split("://", 1)[1]
    return value.rstrip("/").rstrip(".")


def validate_domain(domain: str) -> str:
    """
    Normalize a domain name typed by the user.

    Accepts a pasted URL or a trailing dot and returns the bare lowercase
    name, e.g. ``https://Example.com/`` -> ``example.com``.

    Raises:
        ValidationError: If the name is empty, too long or malformed
    """
    if not domain or not domain.strip():
        raise ValidationError("Domain name is required")

    domain = _clean_hostname(domain)
    if len(domain) > MAX_HOSTNAME_LENGTH:
        raise ValidationError(f"Domain name too long (max {MAX_HOSTNAME_LENGTH} characters)")
    if not HOSTNAME_PATTERN.match(domain):
        raise ValidationError(
            f"Invalid domain format: {domain}",
            "Domain should be in format: example.com or sub.example.com",
        )
    return domain


def split_domain(domain: str) -> Tuple[str, str]:
    """
    Split a domain into the SLD and TLD parameters Namecheap expects.

    Subdomains are dropped: www.example.co.uk -> ('example', 'co.uk')
    """
    labels = validate_domain(domain).split(".")
    suffix = ".".join(labels[-2:])
    if len(labels) >= 3 and suffix in COMPOUND_SUFFIXES:
        return labels[-3], suffix
    return labels[-2], labels[-1]


def validate_email(email: str) -> str:
    address = (email or "").strip().lower()
    if not address:
        raise ValidationError("Email address is required")
    if not EMAIL_PATTERN.match(address):
        raise ValidationError(f"Invalid email format: {address}", "Example: jane@example.com")
    return address


def validate_ip(ip: str) -> str:
    if not ip or not ip.strip():
        raise ValidationError(
            "IP address is required",
            "Provide a valid IPv4 (e.g., 1.2.3.4) or IPv6 address",
        )
    try:
        return str(ipaddress.ip_address(ip.strip()))
    except ValueError:
        raise ValidationError(
            f"Invalid IP address: {ip}",
            "Provide a valid IPv4 (e.g., 1.2.3.4) or IPv6 address (e.g., ::1)",
        )


def validate_record_type(record_type: str) -> str:
    normalized = (record_type or "").strip().upper()
    if normalized not in RECORD_TYPES:
        raise ValidationError(
            f"Invalid record type: {record_type}",
            f"Valid types: {', '.join(RECORD_TYPES)}",
        )
    return normalized


def validate_years(years: int) -> int:
    if not 1 <= years <= 10:
        raise ValidationError("Years must be between 1 and 10")
    return years


def validate_nameservers(nameservers: Sequence[str], minimum: int = 2) -> List[str]:
    """Validate nameserver hostnames, requiring at least ``minimum`` of them"""
    cleaned = [ns.strip().lower().rstrip('.') for ns in nameservers if ns and ns.strip()]
    if len(cleaned) < minimum:
        raise ValidationError(
            f"At least {minimum} nameservers are required",
            "Example: namecheap ns set example.com ns1.host.com ns2.host.com",
        )
    for ns in cleaned:
        if not HOSTNAME_PATTERN.match(ns):
            raise ValidationError(f"Invalid nameserver hostname: {ns}")
    return cleaned
