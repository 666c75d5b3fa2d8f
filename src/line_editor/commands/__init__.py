"""Command-line parsing: addresses and substitutions."""

from .address import AddressRange, ParserState, resolve_addresses
from .substitute import Substitution, parse_substitution

__all__ = [
    "AddressRange",
    "ParserState",
    "resolve_addresses",
    "Substitution",
    "parse_substitution",
]
