"""
Network address validators - ip, ipv4, ipv6, mac_address.
"""

import ipaddress
import re
from typing import Any

from .base_validator import BaseValidator

MAC_ADDRESS_PATTERN = (
    r"([0-9A-Fa-f]{2}[:-]){5}[0-9A-Fa-f]{2}"
    r"|([0-9A-Fa-f]{4}\.){2}[0-9A-Fa-f]{4}"
)


def parse_ip(value: Any) -> ipaddress.IPv4Address | ipaddress.IPv6Address | None:
    if not isinstance(value, str):
        return None
    try:
        return ipaddress.ip_address(value)
    except ValueError:
        return None


class IpValidator(BaseValidator):
    rule_name = "ip"
    default_message = "The :attribute must be a valid IP address."

    def passes(self, attribute: str, value: Any) -> bool:
        return parse_ip(value) is not None


class Ipv4Validator(BaseValidator):
    rule_name = "ipv4"
    default_message = "The :attribute must be a valid IPv4 address."

    def passes(self, attribute: str, value: Any) -> bool:
        return isinstance(parse_ip(value), ipaddress.IPv4Address)


class Ipv6Validator(BaseValidator):
    rule_name = "ipv6"
    default_message = "The :attribute must be a valid IPv6 address."

    def passes(self, attribute: str, value: Any) -> bool:
        return isinstance(parse_ip(value), ipaddress.IPv6Address)


class MacAddressValidator(BaseValidator):
    """Accepts colon or dash separated pairs and Cisco dotted quads."""

    rule_name = "mac_address"
    default_message = "The :attribute must be a valid MAC address."

    def __init__(self, parameters=None, config=None):
        super().__init__(parameters, config)
        self.pattern = re.compile(MAC_ADDRESS_PATTERN)

    def passes(self, attribute: str, value: Any) -> bool:
        return isinstance(value, str) and self.pattern.fullmatch(value) is not None


NETWORK_VALIDATORS: tuple[type[BaseValidator], ...] = (
    IpValidator,
    Ipv4Validator,
    Ipv6Validator,
    MacAddressValidator,
)
