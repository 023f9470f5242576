from dataclasses import dataclass


@dataclass(frozen=True)
class URLMapping:
    """
    A stored alias -> long URL pair.

    Mappings are never mutated once created, so handlers can hold on to
    them without copying.
    """
    alias: str
    long_url: str
