from __future__ import annotations

from enum import Enum


class Company(str, Enum):
    """Companies a trainee or commander belongs to."""

    A = "A"
    B = "B"
    C = "C"
    SUPPORT = "Support"
    MSC = "MSC"
    HQ = "HQ"


class SessionStatus(str, Enum):
    """Status of an attendance session as stored in the database."""

    IN = "IN"
    OUT = "OUT"


class NotificationKind(str, Enum):
    CLOCK_IN = "clock_in"
    CLOCK_OUT = "clock_out"
    OVERDUE = "overdue"


class CommanderRole(str, Enum):
    """Commanders see their own company, admins see all companies."""

    COMMANDER = "commander"
    ADMIN = "admin"


class RegistrationStep(str, Enum):
    COLLECTING_RANK = "collecting_rank"
    COLLECTING_NAME = "collecting_name"
    COLLECTING_NUMBER = "collecting_number"
    COLLECTING_COMPANY = "collecting_company"
    COMPLETE = "complete"
