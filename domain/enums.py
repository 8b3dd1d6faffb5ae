"""Domain Enums"""
from enum import Enum


class RentalStatus(str, Enum):
    ACTIVE = "ACTIVE"
    FINISHED = "FINISHED"
    CANCELED = "CANCELED"
