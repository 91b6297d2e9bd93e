import logging

from mindmap_service.schemas.mindmap import TopicNode

logger = logging.getLogger(__name__)

ROOT_ID = "root"
ROOT_TITLE = "Main Topic"


def _assign_ids(node: TopicNode) -> None:
    """Give nested nodes ids derived from their parent's (topic-2-1, ...)."""
    for position, child in enumerate(node.children, start=1):
        child.id = f"{node.id}-{position}"
        _assign_ids(child)


def merge_topics(trees: list[TopicNode]) -> TopicNode:
    """
    Combine per-chunk topic trees into one root-anchored tree.

    The first non-empty content becomes the root content. Top-level
    subtopics are de-duplicated by case-insensitive title: the first one
    seen wins and later duplicates are dropped along with their subtrees.
    """
    merged = TopicNode(id=ROOT_ID, title=ROOT_TITLE, content="", level=0, children=[])
    seen_titles: set[str] = set()
    dropped = 0

    for tree in trees:
        if not merged.content and tree.content:
            merged.content = tree.content

        for child in tree.children:
            key = child.title.lower()
            if key in seen_titles:
                dropped += 1
                continue
            seen_titles.add(key)

            topic = child.model_copy(deep=True)
            topic.id = f"topic-{len(merged.children) + 1}"
            topic.level = 1
            _assign_ids(topic)
            merged.children.append(topic)

    logger.info(
        f"[MERGE] {len(trees)} tree(s) → {len(merged.children)} subtopic(s), "
        f"{dropped} duplicate(s) dropped"
    )
    return merged
