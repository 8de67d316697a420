"""Generation-tiered node placement and connector geometry."""

from dataclasses import dataclass, field
from typing import Sequence

from models import Member

NODE_WIDTH = 180
NODE_HEIGHT = 100
NODE_SPACING = 200  # Horizontal distance between node origins in a tier
GENERATION_SPACING = 250  # Vertical distance between tiers
START_Y = 50
BOTTOM_MARGIN = 50
DEFAULT_CANVAS_WIDTH = 1200

PARENT = "parent"
SPOUSE = "spouse"

Point = tuple[float, float]


@dataclass(frozen=True)
class Box:
    x: float
    y: float
    width: float = NODE_WIDTH
    height: float = NODE_HEIGHT

    @property
    def bottom_center(self) -> Point:
        return (self.x + self.width / 2, self.y + self.height)

    @property
    def top_center(self) -> Point:
        return (self.x + self.width / 2, self.y)

    @property
    def middle_y(self) -> float:
        return self.y + self.height / 2


@dataclass(frozen=True)
class NodePlacement:
    member: Member
    box: Box


@dataclass(frozen=True)
class Connector:
    """
    A parent-child or spouse edge.

    Parent connectors run from the parent's bottom center to the child's top
    center and are drawn as an L: a vertical drop, then a horizontal run.
    Spouse connectors are a single horizontal segment.
    """

    kind: str
    start: Point
    end: Point
    source_id: str
    target_id: str

    @property
    def segments(self) -> list[tuple[Point, Point]]:
        if self.kind == PARENT:
            corner = (self.start[0], self.end[1])
            return [(self.start, corner), (corner, self.end)]
        return [(self.start, self.end)]


@dataclass
class TreeLayout:
    nodes: list[NodePlacement] = field(default_factory=list)
    connectors: list[Connector] = field(default_factory=list)
    height: float = 0
    width: float = DEFAULT_CANVAS_WIDTH

    def box_for(self, member_id: str) -> Box | None:
        for node in self.nodes:
            if node.member.id == member_id:
                return node.box
        return None


def group_by_generation(members: Sequence[Member]) -> dict[int, list[Member]]:
    """Partition members by generation (1 if unset), keeping input order within each."""
    tiers: dict[int, list[Member]] = {}
    for m in members:
        tiers.setdefault(m.generation or 1, []).append(m)
    return tiers


def compute_layout(members: Sequence[Member], canvas_width: float = DEFAULT_CANVAS_WIDTH) -> TreeLayout:
    """
    Place filtered members on generation tiers and derive connector geometry.

    Each distinct generation becomes one horizontal tier (ascending, top to
    bottom); members of a tier are spaced evenly and centered on the canvas.
    Connectors are only produced between members present in `members`, so a
    parent hidden by a filter simply has no line to its children.

    The result depends only on the arguments.
    """
    if not members:
        return TreeLayout(width=canvas_width)

    tiers = group_by_generation(members)

    nodes: list[NodePlacement] = []
    boxes: dict[str, Box] = {}
    for tier_index, generation in enumerate(sorted(tiers)):
        tier = tiers[generation]
        start_x = (canvas_width - (len(tier) - 1) * NODE_SPACING) / 2
        y = START_Y + tier_index * GENERATION_SPACING
        for i, member in enumerate(tier):
            box = Box(x=start_x + i * NODE_SPACING, y=y)
            nodes.append(NodePlacement(member, box))
            boxes[member.id] = box

    connectors: list[Connector] = []
    seen_pairs: set[frozenset] = set()
    for node in nodes:
        member = node.member

        for parent_id in dict.fromkeys((member.father_id, member.mother_id)):
            parent_box = boxes.get(parent_id) if parent_id else None
            if parent_box is None:
                continue
            connectors.append(
                Connector(PARENT, parent_box.bottom_center, node.box.top_center, parent_id, member.id)
            )

        spouse_box = boxes.get(member.spouse_id) if member.spouse_id else None
        if spouse_box is None:
            continue
        pair = frozenset((member.id, member.spouse_id))
        if pair in seen_pairs:
            continue
        seen_pairs.add(pair)
        connectors.append(_spouse_connector(member.id, node.box, member.spouse_id, spouse_box))

    max_y = max(node.box.y for node in nodes)
    return TreeLayout(
        nodes=nodes,
        connectors=connectors,
        height=max_y + NODE_HEIGHT + BOTTOM_MARGIN,
        width=canvas_width,
    )


def _spouse_connector(member_id: str, box: Box, spouse_id: str, spouse_box: Box) -> Connector:
    # Join the facing edges, left box to right box
    if spouse_box.x < box.x:
        member_id, box, spouse_id, spouse_box = spouse_id, spouse_box, member_id, box
    return Connector(
        SPOUSE,
        (box.x + box.width, box.middle_y),
        (spouse_box.x, spouse_box.middle_y),
        member_id,
        spouse_id,
    )
