from .exchange import ExchangeOperator
from .multi_exchange import MultiExchangeOperator
from .multi_relocate import MultiRelocateOperator
from .relocate import RelocateOperator
from .segments import InterTourOperator, Segment, segment_at
