"""
Business logic and service layer
One service per Namecheap resource; public operations return Result values
"""

from namecheap_cli.services.domain_service import DomainService
from namecheap_cli.services.dns_service import DnsService
from namecheap_cli.services.nameserver_service import NameserverService
from namecheap_cli.services.user_service import UserService
from namecheap_cli.services.whoisguard_service import WhoisGuardService
from namecheap_cli.services.address_service import AddressService

__all__ = [
    # Domains
    "DomainService",
    # DNS records, nameservers, email forwarding
    "DnsService",
    # Child nameservers
    "NameserverService",
    # Account
    "UserService",
    "WhoisGuardService",
    "AddressService",
]
