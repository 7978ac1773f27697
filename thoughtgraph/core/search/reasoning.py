"""
Reasoning-based tree search.

Hands the document outline and the query to an LLM and asks it to pick
the nodes most likely to hold the answer. The reply is parsed leniently;
when the engine fails or the reply cannot be parsed, the keyword search
answers instead, so callers always get a result.
"""

import asyncio
import json
import re
import time

from pydantic import ValidationError as PydanticValidationError

from thoughtgraph.config import SearchConfig
from thoughtgraph.core.hierarchy import flatten_tree
from thoughtgraph.core.llm.base import LLMProvider
from thoughtgraph.core.search.keyword import KeywordTreeSearch
from thoughtgraph.models.search import ExpertKnowledge, NodeSelection, TreeSearchResult
from thoughtgraph.models.tree import TreeIndex, TreeNode
from thoughtgraph.utils.exceptions import LLMError, ResponseParseError
from thoughtgraph.utils.logger import get_logger

logger = get_logger(__name__)

PROMPT_SUMMARY_LENGTH = 150

_CODE_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")
_SELECTION_OBJECT = re.compile(r"\{[\s\S]*\"thinking\"[\s\S]*\"node_list\"[\s\S]*\}")
_NODE_LIST = re.compile(r"\"node_list\"\s*:\s*\[([\s\S]*?)\]")
_THINKING = re.compile(r"\"thinking\"\s*:\s*\"([^\"\\]*(?:\\.[^\"\\]*)*)\"")
_QUOTED = re.compile(r"\"([^\"]+)\"")

EXPERT_KNOWLEDGE_PRESETS: dict[str, ExpertKnowledge] = {
    "general": ExpertKnowledge(
        domain="General",
        rules=[
            "For questions about specific topics: find sections with matching titles",
            "For overview questions: prioritize introduction or summary sections",
            "For detailed information: prioritize specific subsections over general ones",
            "When multiple sections might be relevant: include all of them",
        ],
    ),
    "technical": ExpertKnowledge(
        domain="Technical Documentation",
        rules=[
            "For API questions: prioritize API Reference, Methods, or Functions sections",
            "For setup questions: prioritize Installation, Configuration, or Getting Started",
            "For examples: prioritize Examples, Usage, or Code Samples sections",
            "For troubleshooting: prioritize FAQ, Troubleshooting, or Common Issues",
        ],
    ),
    "legal": ExpertKnowledge(
        domain="Legal",
        rules=[
            "For definitions: prioritize Definitions or Glossary sections",
            "For obligations: prioritize Responsibilities or Duties sections",
            "For limitations: prioritize Limitations or Exclusions sections",
        ],
    ),
    "academic": ExpertKnowledge(
        domain="Academic",
        rules=[
            "For main findings: prioritize Results or Conclusions sections",
            "For methodology: prioritize Methods or Materials sections",
            "For context: prioritize Introduction or Background sections",
        ],
    ),
    "portfolio": ExpertKnowledge(
        domain="Portfolio",
        rules=[
            "For skills: prioritize Skills or Technologies sections",
            "For experience: prioritize Experience or Work History sections",
            "For projects: prioritize Projects or Portfolio sections",
        ],
    ),
}


def parse_selection(reply: str) -> NodeSelection:
    """
    Extract a node selection from an LLM reply.

    Tries, in order: the whole reply as JSON, a fenced code block, the
    first object holding "thinking" and "node_list", and finally a
    regex salvage of the node_list array.

    Raises:
        ResponseParseError: If no strategy yields a node list
    """
    text = reply.strip()

    candidates = [text]
    block = _CODE_BLOCK.search(text)
    if block:
        candidates.append(block.group(1).strip())
    obj = _SELECTION_OBJECT.search(text)
    if obj:
        candidates.append(obj.group(0))

    for candidate in candidates:
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict) and ("thinking" in data or "node_list" in data):
            try:
                return NodeSelection.model_validate(
                    {
                        "thinking": data.get("thinking") or "",
                        "node_list": [str(n) for n in data.get("node_list") or []],
                    }
                )
            except (PydanticValidationError, TypeError):
                continue

    node_list = _NODE_LIST.search(text)
    if node_list:
        thinking = _THINKING.search(text)
        return NodeSelection(
            thinking=thinking.group(1).replace('\\"', '"')
            if thinking
            else "Extracted from partial response",
            node_list=_QUOTED.findall(node_list.group(1)),
        )

    raise ResponseParseError(
        "Failed to parse search response", context={"reply": reply[:500]}
    )


class ReasoningTreeSearch:
    """
    LLM-guided tree search with keyword fallback.

    Usage:
        search = ReasoningTreeSearch(llm, SearchConfig(max_results=5))
        result = await search.search_tree(tree, "How do I install it?")
    """

    def __init__(
        self,
        llm: LLMProvider,
        config: SearchConfig | None = None,
        expert_knowledge: ExpertKnowledge | None = None,
        fallback: KeywordTreeSearch | None = None,
        max_tokens: int = 1000,
    ):
        """
        Initialize reasoning search.

        Args:
            llm: Reasoning engine
            config: Search configuration (temperature, timeout, max_results)
            expert_knowledge: Domain rules included in the prompt
            fallback: Search used when the engine fails
            max_tokens: Reply budget
        """
        self.llm = llm
        self.config = config or SearchConfig()
        self.expert_knowledge = expert_knowledge or EXPERT_KNOWLEDGE_PRESETS["general"]
        self.fallback = fallback or KeywordTreeSearch(self.config)
        self.max_tokens = max_tokens

    def set_expert_knowledge(self, knowledge: ExpertKnowledge) -> None:
        self.expert_knowledge = knowledge

    async def search_tree(self, tree: TreeIndex, query: str) -> TreeSearchResult:
        """
        Select relevant nodes with the reasoning engine.

        Node ids the engine invents are dropped. Engine errors, timeouts
        and unparseable replies fall back to keyword search.

        Args:
            tree: Tree index to search
            query: User query

        Returns:
            Selected node ids with the engine's reasoning
        """
        start = time.perf_counter()
        prompt = self.build_prompt(query, self.format_tree(tree))

        try:
            reply = await asyncio.wait_for(
                self.llm.complete(
                    prompt,
                    max_tokens=self.max_tokens,
                    temperature=self.config.temperature,
                    json_mode=True,
                ),
                timeout=self.config.timeout,
            )
            selection = parse_selection(reply)
        except (LLMError, TimeoutError) as e:
            logger.warning(f"Reasoning search failed, using keyword search: {e}")
            result = self.fallback.search_tree(tree, query)
            return result.model_copy(
                update={
                    "rationale": f"Reasoning search unavailable ({type(e).__name__}). "
                    + result.rationale,
                    "search_time_ms": (time.perf_counter() - start) * 1000,
                }
            )

        known_ids = {node.node_id for node in flatten_tree(tree.nodes)}
        node_list = [n for n in dict.fromkeys(selection.node_list) if n in known_ids]
        dropped = len(selection.node_list) - len(node_list)
        if dropped:
            logger.warning(f"Dropped {dropped} unknown node ids from reasoning reply")

        return TreeSearchResult(
            node_list=node_list[: self.config.max_results],
            rationale=selection.thinking,
            search_time_ms=(time.perf_counter() - start) * 1000,
        )

    @staticmethod
    def format_tree(tree: TreeIndex) -> str:
        """Outline of the tree with ids and truncated summaries, for the prompt."""
        lines = [f"Document: {tree.title}"]
        if tree.description:
            lines.append(f"Description: {tree.description}")
        lines.extend(["", "Structure:"])

        def format_node(node: TreeNode, indent: int) -> None:
            prefix = "  " * indent
            lines.append(f"{prefix}- [{node.node_id}] {node.title}")
            if node.summary:
                summary = node.summary
                if len(summary) > PROMPT_SUMMARY_LENGTH:
                    summary = summary[:PROMPT_SUMMARY_LENGTH] + "..."
                lines.append(f"{prefix}  Summary: {summary}")
            for child in node.children:
                format_node(child, indent + 1)

        for node in tree.nodes:
            format_node(node, 0)
        return "\n".join(lines)

    def build_prompt(self, query: str, tree_structure: str) -> str:
        rules = "\n".join(f"- {rule}" for rule in self.expert_knowledge.rules)
        return f"""You are given a query and the tree structure of a document.
You need to find all nodes that are likely to contain the answer.

Query: {query}

Document tree structure:
{tree_structure}

Expert Knowledge for this domain ({self.expert_knowledge.domain}):
{rules}

Instructions:
1. Analyze the query to understand what information is being requested
2. Review the tree structure and node summaries
3. Use the expert knowledge to guide your selection
4. Select nodes that are most likely to contain relevant information
5. Prefer specific leaf nodes over general parent nodes when possible
6. Include parent nodes only if they contain unique information not in children

Reply in the following JSON format (and ONLY this JSON, no other text):
{{
  "thinking": "<your step-by-step reasoning about which nodes are relevant and why>",
  "node_list": ["nodeId1", "nodeId2"]
}}"""
