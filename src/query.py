"""Member filtering and list ordering."""

from dataclasses import dataclass
from typing import Iterable

from models import Member, coerce_generation


@dataclass(frozen=True)
class QueryFilter:
    """
    AND-combination of optional criteria over members.

    - search: case-insensitive substring of the member's name
    - generation: exact generation number
    - gender: exact gender value

    A criterion left as None matches every member.
    """

    search: str | None = None
    generation: int | None = None
    gender: str | None = None

    @classmethod
    def from_mapping(cls, values: dict | None) -> "QueryFilter":
        """
        Build a filter from loose UI values.

        Empty strings mean "no criterion" and generation may be given as text.
        A generation that is not a positive number is dropped.
        """
        if not values:
            return cls()
        search = values.get("search") or None
        gender = values.get("gender") or None
        generation = values.get("generation")
        if generation in (None, ""):
            generation = None
        else:
            generation = coerce_generation(generation, default=0) or None
        return cls(search=search, generation=generation, gender=gender)

    def matches(self, member: Member) -> bool:
        if self.search and self.search.lower() not in member.name.lower():
            return False
        if self.generation is not None and member.generation != self.generation:
            return False
        if self.gender and member.gender != self.gender:
            return False
        return True

    def apply(self, members: Iterable[Member]) -> list[Member]:
        """Return the matching members, preserving their order."""
        return [m for m in members if self.matches(m)]


def sort_for_list(members: Iterable[Member]) -> list[Member]:
    """Order members for the flat list view: generation, then name."""
    return sorted(members, key=lambda m: (m.generation, m.name))
