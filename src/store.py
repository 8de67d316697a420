"""In-memory member collection with relationship invariant maintenance."""

import dataclasses
import logging
import uuid
from typing import Iterable

from models import (
    FEMALE,
    GENDERS,
    MALE,
    OPTIONAL_FIELDS,
    DeleteResult,
    Member,
    MemberDetail,
    clean_optional,
    coerce_generation,
)
from query import QueryFilter
from relationships import RelationshipResolver

logger = logging.getLogger(__name__)

# Fields callers may set; `id` is assigned by the store and never changes
EDITABLE_FIELDS = frozenset(f.name for f in dataclasses.fields(Member)) - {"id"}

HAS_CHILDREN_REASON = "Member has children; delete them or change their parent links first."


def sample_members() -> list[Member]:
    """The dataset used to seed an empty storage."""
    return [
        Member(
            id="1",
            name="Li Shangfan",
            gender=MALE,
            birth_date="1989-03-01",
            generation=1,
            spouse_id="2",
            description="Founder of the family",
        ),
        Member(
            id="2",
            name="Hou Qingli",
            gender=FEMALE,
            birth_date="1993-10-16",
            generation=1,
            spouse_id="1",
            description="Spouse of the founder",
        ),
    ]


class GraphStore:
    """
    Owns the member collection.

    Every mutation keeps spouse links symmetric: if A.spouse_id == B.id then
    B.spouse_id == A.id. Failures are reported through return values.
    """

    def __init__(self, members: Iterable[Member] | None = None, adapter=None):
        self._members: list[Member] = []
        self.resolver = RelationshipResolver(self._members)
        self.adapter = adapter
        if members:
            self._load(members)

    @classmethod
    def open(cls, adapter) -> "GraphStore":
        """Load the collection from `adapter`, seeding the sample data if it is empty."""
        members = adapter.load()
        if members is None:
            logger.info("No stored members found, seeding sample data")
            store = cls(sample_members(), adapter=adapter)
            store.save()
            return store
        return cls(members, adapter=adapter)

    @property
    def members(self) -> list[Member]:
        return list(self._members)

    def __len__(self) -> int:
        return len(self._members)

    def save(self):
        if self.adapter is not None:
            self.adapter.save(list(self._members))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get(self, member_id: str) -> Member | None:
        return self.resolver.get(member_id)

    def list_members(self, query: QueryFilter | dict | None = None) -> list[Member]:
        if query is None:
            return list(self._members)
        if not isinstance(query, QueryFilter):
            query = QueryFilter.from_mapping(query)
        return query.apply(self._members)

    def detail(self, member_id: str) -> MemberDetail | None:
        member = self.get(member_id)
        if member is None:
            return None
        father, mother = self.resolver.parents(member)
        return MemberDetail(
            member=member,
            father=father,
            mother=mother,
            spouse=self.resolver.spouse(member),
            children=self.resolver.children(member.id),
        )

    def generations(self) -> list[int]:
        return sorted({m.generation for m in self._members})

    def parent_candidates(self, gender: str | None = None, exclude_id: str | None = None) -> list[Member]:
        """Members selectable as father (male), mother (female) or spouse (any) of `exclude_id`."""
        return [
            m
            for m in self._members
            if m.id != exclude_id and (gender is None or m.gender == gender)
        ]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def create(self, data: dict) -> Member:
        fields = self._clean(data)
        fields["generation"] = coerce_generation(fields.get("generation"))
        fields.setdefault("name", "")
        spouse_id = fields.pop("spouse_id", None)

        member = Member(id=uuid.uuid4().hex, **fields)
        self._members.append(member)
        if spouse_id:
            self._link_spouse(member, spouse_id)

        self.save()
        logger.info("Created member %s (%s)", member.id, member.name)
        return member

    def update(self, member_id: str, data: dict) -> Member | None:
        member = self.get(member_id)
        if member is None:
            return None

        fields = self._clean(data)
        if "generation" in fields:
            fields["generation"] = coerce_generation(fields["generation"], default=member.generation)
        spouse_changed = "spouse_id" in fields
        spouse_id = fields.pop("spouse_id", None)

        for name, value in fields.items():
            setattr(member, name, value)
        if spouse_changed:
            self._link_spouse(member, spouse_id)

        self.save()
        logger.info("Updated member %s", member.id)
        return member

    def delete(self, member_id: str) -> DeleteResult:
        member = self.get(member_id)
        if member is None:
            return DeleteResult(False, f"Member {member_id} not found")

        # Checked before anything is touched so a refusal leaves no trace
        if self.resolver.has_children(member_id):
            return DeleteResult(False, HAS_CHILDREN_REASON)

        spouse = self.resolver.spouse(member)
        if spouse is not None and spouse.spouse_id == member.id:
            spouse.spouse_id = None

        self._members[:] = [m for m in self._members if m is not member]
        self.save()
        logger.info("Deleted member %s", member_id)
        return DeleteResult(True)

    def replace_all(self, members: Iterable[Member]):
        """Swap in a whole new collection, as an import does."""
        self._load(members)
        self.save()
        logger.info("Replaced collection with %d members", len(self._members))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _load(self, members: Iterable[Member]):
        loaded = []
        for m in members:
            m = dataclasses.replace(m)
            m.generation = coerce_generation(m.generation)
            if m.gender not in GENDERS:
                m.gender = MALE
            if not m.id:
                m.id = uuid.uuid4().hex
            loaded.append(m)
        # Slice assignment keeps the list shared with the resolver
        self._members[:] = loaded
        self._repair_spouse_links()

    def _clean(self, data: dict) -> dict:
        fields = {}
        for name, value in data.items():
            if name not in EDITABLE_FIELDS:
                logger.debug("Ignoring field %r", name)
                continue
            if name in OPTIONAL_FIELDS:
                value = clean_optional(value)
            fields[name] = value
        if "name" in fields:
            fields["name"] = str(fields["name"] or "")
        if "gender" in fields and fields["gender"] not in GENDERS:
            logger.debug("Ignoring gender %r", fields.pop("gender"))
        if "description" in fields:
            fields["description"] = fields["description"] or ""
        return fields

    def _link_spouse(self, member: Member, spouse_id: str | None):
        """
        Pair `member` with `spouse_id` (or unpair it when None).

        The member's previous partner is released. A target that is already
        paired with someone else is re-paired, releasing its old partner.
        """
        if spouse_id == member.id:
            logger.warning("Ignoring self-referencing spouse link on %s", member.id)
            spouse_id = None

        previous = self.get(member.spouse_id)
        if previous is not None and previous.id != spouse_id and previous.spouse_id == member.id:
            previous.spouse_id = None
        member.spouse_id = spouse_id

        if spouse_id is None:
            return
        partner = self.get(spouse_id)
        if partner is None:
            logger.warning("Spouse %s of member %s does not exist", spouse_id, member.id)
            return

        if partner.spouse_id and partner.spouse_id != member.id:
            logger.warning(
                "Member %s was paired with %s; re-pairing with %s",
                partner.id,
                partner.spouse_id,
                member.id,
            )
            former = self.get(partner.spouse_id)
            if former is not None and former.spouse_id == partner.id:
                former.spouse_id = None
        partner.spouse_id = member.id

    def _repair_spouse_links(self):
        """
        Make loaded spouse links symmetric.

        A link whose target has no partner is completed; a link whose target is
        paired with someone else is dropped. Links to unknown ids are kept.
        """
        by_id = {m.id: m for m in self._members}
        for m in self._members:
            if not m.spouse_id:
                continue
            if m.spouse_id == m.id:
                m.spouse_id = None
                continue
            partner = by_id.get(m.spouse_id)
            if partner is None or partner.spouse_id == m.id:
                continue
            if partner.spouse_id is None:
                partner.spouse_id = m.id
            else:
                logger.warning("Dropping one-sided spouse link %s -> %s", m.id, partner.id)
                m.spouse_id = None
