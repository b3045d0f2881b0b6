"""
Shared Kernel primitives.

Re-exports the minimal set of domain primitives so that bounded contexts can import
them from one place:

    from tradelab.shared_kernel.primitives import DateRange, Symbol
"""

from .date_range import DateRange, parse_iso_date
from .symbol import Symbol

__all__ = [
    "DateRange",
    "Symbol",
    "parse_iso_date",
]
