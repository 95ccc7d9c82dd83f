"""Record types and patterns shared by the unit tests."""
from dataclasses import dataclass
from enum import Enum
from typing import Optional

PERSON_PATTERN = r"^(?<LastName>\w.*), (?<FirstName>\w.*) \((?<Age>\w.*)\)"
PERSON_WITH_SEX_PATTERN = r"^(?<LastName>\w.*), (?<FirstName>\w.*) \((?<Age>\w.*)\) (?<Sex>\w.*)"
CONTACT_PATTERN = r"^(?<Name>\w+) (?:(?<Title>[A-Z][a-z]+\.)|(?<Rank>\d+))$"


class Sex(str, Enum):
    F = "F"
    M = "M"


@dataclass
class Person:
    FirstName: str
    LastName: str
    Age: int


@dataclass
class PersonWithSex:
    FirstName: str
    LastName: str
    Age: int
    Sex: Sex


@dataclass
class Contact:
    Name: str
    Title: Optional[str] = None
    Rank: int = 0


def parse_sex(raw: str) -> Sex:
    """Map "Male" to Sex.M and anything else to Sex.F."""
    return Sex.M if raw == "Male" else Sex.F
