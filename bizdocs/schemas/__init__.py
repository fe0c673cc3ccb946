from .company import CompanyIn, CompanyRead
from .document import (
    AmountsRead,
    CalculationIn,
    DocumentIn,
    DocumentPage,
    DocumentRead,
    FromEstimateIn,
    LineItemIn,
    LineItemRead,
    StatusIn,
)
from .party import PartyIn, PartyRead

__all__ = [
    "AmountsRead",
    "CalculationIn",
    "CompanyIn",
    "CompanyRead",
    "DocumentIn",
    "DocumentPage",
    "DocumentRead",
    "FromEstimateIn",
    "LineItemIn",
    "LineItemRead",
    "PartyIn",
    "PartyRead",
    "StatusIn",
]
