"""Enumeration types for wallet entities."""

from enum import Enum


class ComponentKind(str, Enum):
    PRINCIPAL = "PRINCIPAL"
    INTEREST = "INTEREST"
    PENALTY = "PENALTY"
    FEE = "FEE"


class InstallmentStatus(str, Enum):
    OPEN = "OPEN"
    PAID = "PAID"


class IndexType(str, Enum):
    IPCA = "IPCA"
    IGPM = "IGPM"
    CDI = "CDI"
    SELIC = "SELIC"


class ScheduleCurve(str, Enum):
    PRICE = "PRICE"
    SAC = "SAC"
