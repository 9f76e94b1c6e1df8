"""Enumeration types for policy and premium entities."""

from enum import Enum


class PremiumMode(str, Enum):
    MONTHLY = "MONTHLY"
    QUARTERLY = "QUARTERLY"
    HALF_YEARLY = "HALF_YEARLY"
    YEARLY = "YEARLY"
    SINGLE = "SINGLE"


class PolicyStatus(str, Enum):
    ACTIVE = "ACTIVE"
    LAPSED = "LAPSED"
    MATURED = "MATURED"
    SURRENDERED = "SURRENDERED"


class PaymentStatus(str, Enum):
    UPCOMING = "UPCOMING"
    UNPAID = "UNPAID"  # past due, still inside the grace period
    OVERDUE = "OVERDUE"


class PaymentMode(str, Enum):
    CASH = "CASH"
    CHEQUE = "CHEQUE"
    ONLINE = "ONLINE"
    UPI = "UPI"
    CARD = "CARD"
