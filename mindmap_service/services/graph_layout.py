from mindmap_service.schemas.mindmap import (
    EdgeStyle,
    MindMapEdge,
    MindMapGraph,
    MindMapNode,
    NodeData,
    Position,
    TopicNode,
)

CHILD_SPACING = 200
LEVEL_SPACING = 150

PRIMARY_EDGE_STYLE = EdgeStyle(stroke="#10b981", stroke_width=3)
SECONDARY_EDGE_STYLE = EdgeStyle(stroke="#f97316", stroke_width=2)


def _edge_style(level: int) -> EdgeStyle:
    return PRIMARY_EDGE_STYLE if level == 1 else SECONDARY_EDGE_STYLE


def layout_mind_map(root: TopicNode) -> MindMapGraph:
    """
    Lay a topic tree out top-down as a positioned node/edge graph.

    The root sits at (0, 0); each level is LEVEL_SPACING lower and siblings
    are CHILD_SPACING apart, centred under their parent. Nodes are emitted
    in pre-order.
    """
    nodes: list[MindMapNode] = []
    edges: list[MindMapEdge] = []

    # (node, parent_id, x, y); children are pushed reversed to keep pre-order
    stack: list[tuple[TopicNode, str | None, float, float]] = [(root, None, 0.0, 0.0)]
    while stack:
        node, parent_id, x, y = stack.pop()

        nodes.append(
            MindMapNode(
                id=node.id,
                position=Position(x=x, y=y),
                data=NodeData(label=node.title, level=node.level, content=node.content, is_expanded=True),
            )
        )
        if parent_id is not None:
            edges.append(
                MindMapEdge(
                    id=f"{parent_id}-{node.id}",
                    source=parent_id,
                    target=node.id,
                    style=_edge_style(node.level),
                )
            )

        start_x = x - (len(node.children) - 1) * CHILD_SPACING / 2
        for index in reversed(range(len(node.children))):
            stack.append((node.children[index], node.id, start_x + index * CHILD_SPACING, y + LEVEL_SPACING))

    return MindMapGraph(nodes=nodes, edges=edges)
