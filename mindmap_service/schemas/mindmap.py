from __future__ import annotations
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Any, List


# ── Topic Tree ───────────────────────────────────────────────────────────────

class TopicNode(BaseModel):
    """A node of the topic hierarchy extracted from text (recursive)."""
    id: str = ""
    title: str
    content: str = ""
    level: int = Field(default=0, ge=0)
    children: List[TopicNode] = []

    @field_validator("content", mode="before")
    @classmethod
    def null_content_is_empty(cls, v: Any) -> Any:
        return "" if v is None else v

    @field_validator("children", mode="before")
    @classmethod
    def null_children_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v


# ── Mind Map Graph ───────────────────────────────────────────────────────────

class Position(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float
    y: float


class NodeData(BaseModel):
    """Display payload of a rendered node."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    label: str
    level: int
    content: str
    is_expanded: bool = Field(default=True, alias="isExpanded")


class MindMapNode(BaseModel):
    """A positioned node, derived 1:1 from a TopicNode."""
    model_config = ConfigDict(frozen=True)

    id: str
    type: str = "custom"
    position: Position
    data: NodeData


class EdgeStyle(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    stroke: str
    stroke_width: int = Field(alias="strokeWidth")


class MindMapEdge(BaseModel):
    """A parent → child connection."""
    model_config = ConfigDict(frozen=True)

    id: str
    source: str
    target: str
    type: str = "smoothstep"
    animated: bool = True
    style: EdgeStyle


class MindMapGraph(BaseModel):
    """Full mind map response returned to the client."""
    nodes: List[MindMapNode]
    edges: List[MindMapEdge]
