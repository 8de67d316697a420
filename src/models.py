"""Data classes for family tree entities."""

from dataclasses import dataclass, field

MALE = "male"
FEMALE = "female"
GENDERS = (MALE, FEMALE)

# Serialized (JSON) key for each Member field
WIRE_KEYS = {
    "id": "id",
    "name": "name",
    "gender": "gender",
    "birth_date": "birthDate",
    "death_date": "deathDate",
    "generation": "generation",
    "father_id": "fatherId",
    "mother_id": "motherId",
    "spouse_id": "spouseId",
    "description": "description",
}

# Fields where an empty string means "not set"
OPTIONAL_FIELDS = ("birth_date", "death_date", "father_id", "mother_id", "spouse_id")


def coerce_generation(value, default: int = 1) -> int:
    """Return `value` as a positive generation number, or `default` if it isn't one."""
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value if value > 0 else default
    if isinstance(value, float):
        return int(value) if value.is_integer() and value > 0 else default
    if isinstance(value, str):
        try:
            number = int(value.strip())
        except ValueError:
            return default
        return number if number > 0 else default
    return default


def clean_optional(value) -> str | None:
    """Normalize an optional reference or date: empty values become None."""
    if value is None or value == "":
        return None
    return str(value)


@dataclass
class Member:
    id: str
    name: str
    gender: str = MALE
    birth_date: str | None = None  # ISO format YYYY-MM-DD or None
    death_date: str | None = None  # absent means living
    generation: int = 1
    father_id: str | None = None
    mother_id: str | None = None
    spouse_id: str | None = None
    description: str = ""

    @property
    def is_living(self) -> bool:
        return self.death_date is None

    def to_dict(self) -> dict:
        """Serialize using the camelCase keys of the export format."""
        return {wire: getattr(self, attr) for attr, wire in WIRE_KEYS.items()}

    @classmethod
    def from_dict(cls, data: dict) -> "Member":
        """Build a Member from a serialized record. Unknown keys are ignored."""
        values = {}
        for attr, wire in WIRE_KEYS.items():
            if wire in data:
                values[attr] = data[wire]
        for attr in OPTIONAL_FIELDS:
            values[attr] = clean_optional(values.get(attr))
        return cls(
            id=str(values.get("id") or ""),
            name=str(values.get("name") or ""),
            gender=values.get("gender") or MALE,
            birth_date=values["birth_date"],
            death_date=values["death_date"],
            generation=coerce_generation(values.get("generation")),
            father_id=values["father_id"],
            mother_id=values["mother_id"],
            spouse_id=values["spouse_id"],
            description=values.get("description") or "",
        )


@dataclass
class DeleteResult:
    success: bool
    reason: str | None = None


@dataclass
class ImportResult:
    success: bool
    message: str
    count: int = 0


@dataclass
class MemberDetail:
    """A member together with its resolved relatives."""

    member: Member
    father: Member | None = None
    mother: Member | None = None
    spouse: Member | None = None
    children: list[Member] = field(default_factory=list)
