"""Read-only relationship queries and NetworkX graph building."""

from typing import Sequence

import networkx as nx

from models import Member

PARENT_OF = "PARENT_OF"
SPOUSE_OF = "SPOUSE_OF"


def build_graph(members: Sequence[Member]) -> nx.DiGraph:
    """
    Build a NetworkX directed graph from member records.

    PARENT_OF edges point from parent to child. SPOUSE_OF edges are added in
    the direction recorded on each member, so a symmetric pairing yields one
    edge each way. References to ids that are not in `members` are skipped.
    """
    G = nx.DiGraph()

    # Note: use 'person_name' instead of 'name' to avoid conflict with pydot
    for m in members:
        G.add_node(
            m.id,
            person_name=m.name,
            sex=m.gender,
            birth_date=m.birth_date,
            death_date=m.death_date,
            generation=m.generation,
        )

    for m in members:
        for parent_id in (m.father_id, m.mother_id):
            if parent_id and parent_id in G:
                G.add_edge(parent_id, m.id, relationship_type=PARENT_OF)
        if m.spouse_id and m.spouse_id in G:
            G.add_edge(m.id, m.spouse_id, relationship_type=SPOUSE_OF)

    return G


class RelationshipResolver:
    """
    Graph queries over the store's member list.

    The resolver holds a reference to the list itself, not a copy, so it
    always sees the current records.
    """

    def __init__(self, members: Sequence[Member]):
        self.members = members

    def get(self, member_id: str | None) -> Member | None:
        if not member_id:
            return None
        for m in self.members:
            if m.id == member_id:
                return m
        return None

    def children(self, member_id: str) -> list[Member]:
        """All members whose father or mother is `member_id`, in store order."""
        return [m for m in self.members if m.father_id == member_id or m.mother_id == member_id]

    def has_children(self, member_id: str) -> bool:
        return any(m.father_id == member_id or m.mother_id == member_id for m in self.members)

    def root_members(self) -> list[Member]:
        """Members in generation 1 or with neither parent link set."""
        return [m for m in self.members if m.generation == 1 or (not m.father_id and not m.mother_id)]

    def parents(self, member: Member) -> tuple[Member | None, Member | None]:
        """Resolve (father, mother); unresolvable links come back as None."""
        return self.get(member.father_id), self.get(member.mother_id)

    def spouse(self, member: Member) -> Member | None:
        return self.get(member.spouse_id)

    def descendants(self, member_id: str) -> list[Member]:
        """
        Every member reachable from `member_id` along parent -> child links.

        Ancestry is not checked for cycles; the traversal tolerates them but the
        start member itself is never reported as its own descendant.
        """
        G = build_graph(self.members)
        if member_id not in G:
            return []
        parent_edges = nx.subgraph_view(
            G, filter_edge=lambda u, v: G.edges[u, v]["relationship_type"] == PARENT_OF
        )
        found = nx.descendants(parent_edges, member_id)
        found.discard(member_id)
        return [m for m in self.members if m.id in found]
