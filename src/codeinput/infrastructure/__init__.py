"""Infrastructure: concrete lookup client and result cache."""

from .cache import LookupCache
from .fhir import ValueSetExpandClient, decode_expansion

__all__ = ["LookupCache", "ValueSetExpandClient", "decode_expansion"]
