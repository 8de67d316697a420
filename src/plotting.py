"""Rendering of computed tree layouts."""

from pathlib import Path

import pydot

from layout import PARENT, TreeLayout

POINTS_PER_INCH = 72
DPI = 100

FILL_COLORS = {"male": "lightblue", "female": "lightpink"}


def node_label(member) -> str:
    """Name on the first line, life-span years on the second."""
    # Dates are ISO "YYYY-MM-DD" (or just "YYYY")
    birth_year = member.birth_date[:4] if member.birth_date else ""
    death_year = member.death_date[:4] if member.death_date else ""
    if not birth_year and not death_year:
        return member.name
    return f"{member.name}\n{birth_year}-{death_year}"


def layout_to_dot(layout: TreeLayout) -> pydot.Dot:
    """
    Convert a layout into a Graphviz graph with pinned node positions.

    Positions are in points with the y axis flipped, as neato expects with
    `-n`; render with prog="neato" to keep the computed arrangement.
    """
    P = pydot.Dot(graph_type="digraph")
    P.set("splines", "ortho")
    P.set("bb", f"0,0,{layout.width},{layout.height}")

    for node in layout.nodes:
        box = node.box
        member = node.member
        P.add_node(
            pydot.Node(
                str(member.id),
                label=node_label(member),
                shape="box",
                style="rounded,filled",
                fillcolor=FILL_COLORS.get(member.gender, "lightgray"),
                fontsize="10",
                pos=f"{box.x + box.width / 2},{layout.height - box.middle_y}!",
                width=str(box.width / POINTS_PER_INCH),
                height=str(box.height / POINTS_PER_INCH),
                fixedsize="true",
            )
        )

    for connector in layout.connectors:
        if connector.kind == PARENT:
            # Parent to child: arrow pointing down
            P.add_edge(pydot.Edge(str(connector.source_id), str(connector.target_id), color="darkgray"))
        else:
            P.add_edge(
                pydot.Edge(
                    str(connector.source_id),
                    str(connector.target_id),
                    dir="none",
                    color="darkgray",
                )
            )

    return P


def plot_layout(layout: TreeLayout, output_path: Path | None = None):
    """
    Draw the layout: one box per member, colored by gender, plus connector lines.

    Args:
        layout: Output of layout.compute_layout
        output_path: Where to save the image. ".dot" writes DOT source, ".svg"
            and ".pdf" go through Graphviz, anything else is drawn with
            matplotlib. If None, displays interactively.
    """
    if output_path is not None:
        ext = output_path.suffix.lower().lstrip(".")
        if ext == "dot":
            layout_to_dot(layout).write(str(output_path), format="raw")
            print(f"Graph saved to {output_path}")
            return
        if ext in ("svg", "pdf"):
            layout_to_dot(layout).write(str(output_path), prog=["neato", "-n"], format=ext)
            print(f"Graph saved to {output_path}")
            return

    import matplotlib.pyplot as plt
    from matplotlib.patches import FancyBboxPatch

    width = max(layout.width, 1)
    height = max(layout.height, 100)
    fig, ax = plt.subplots(figsize=(width / DPI, height / DPI), dpi=DPI)
    ax.set_xlim(0, width)
    ax.set_ylim(height, 0)  # Screen coordinates: y grows downward
    ax.axis("off")

    for connector in layout.connectors:
        for (x0, y0), (x1, y1) in connector.segments:
            ax.plot([x0, x1], [y0, y1], color="darkgray", linewidth=1.5, zorder=1)

    for node in layout.nodes:
        box = node.box
        ax.add_patch(
            FancyBboxPatch(
                (box.x, box.y),
                box.width,
                box.height,
                boxstyle="round,pad=0,rounding_size=8",
                facecolor=FILL_COLORS.get(node.member.gender, "lightgray"),
                edgecolor="gray",
                zorder=2,
            )
        )
        ax.text(
            box.x + box.width / 2,
            box.middle_y,
            node_label(node.member),
            ha="center",
            va="center",
            fontsize=9,
            zorder=3,
        )
        ax.text(
            box.x + box.width - 6,
            box.y + 6,
            str(node.member.generation),
            ha="right",
            va="top",
            fontsize=7,
            color="dimgray",
            zorder=3,
        )

    if output_path:
        fig.savefig(output_path, dpi=DPI)
        plt.close(fig)
        print(f"Graph saved to {output_path}")
    else:
        plt.show()
