"""
Chat orchestrator LangGraph pipeline.

Graph topology:
    START → prepare → call_model ⟷ execute_function → END

Nodes:
    prepare          — rebuild the system prompt for the property, trim the
                       history, attach the processed file (if any)
    call_model       — one chat completion with the function catalog
    execute_function — append the assistant's call turn, run the executor,
                       append the function result turn, count the call

Routing:
    call_model → execute_function  (function call requested AND count < ceiling)
    call_model → END               (plain answer, or ceiling reached)

Turns are append-only. The loop stops silently at the ceiling and returns the
last model response as-is, even if it is still an unresolved function call.
Model provider failures abort the request as ModelProviderError; executor
failures are fed back to the model as {"error": ...} results.

Usage:
    orchestrator = ChatOrchestrator(client, repository, settings.orchestrator)
    result = await orchestrator.process_conversation(messages, property_id, file=payload)
"""

import json
from typing import Any

import structlog
from langgraph.graph import END, StateGraph
from openai import AsyncOpenAI
from pydantic import BaseModel

from eventav.agents.knowledge_base import AV_KNOWLEDGE_BASE
from eventav.agents.prompts import PromptAssembler, inventory_context
from eventav.agents.tools import FUNCTION_CATALOG, FunctionExecutors
from eventav.config import OrchestratorConfig
from eventav.constants import DOCUMENT_ANALYSIS_INSTRUCTIONS, IMAGE_ANALYSIS_INSTRUCTIONS
from eventav.models.chat import ChatMessage, ImagePayload, ProcessedFile, TokenUsage
from eventav.services.property_repository import PropertyRepository

logger = structlog.get_logger(__name__)

# Type alias for state (using dict for LangGraph compatibility)
GraphState = dict[str, Any]


class ModelProviderError(Exception):
    """The model provider call failed (network, auth, malformed response)."""


class ConversationResult(BaseModel):
    """Outcome of one orchestrated chat request."""

    message: str | None
    usage: TokenUsage | None = None
    function_call_count: int = 0


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def trim_history(messages: list[ChatMessage], max_turns: int) -> list[dict[str, Any]]:
    """Keep the most recent max_turns prior turns, as provider message dicts."""
    kept = messages[-max_turns:] if len(messages) > max_turns else messages
    if len(kept) < len(messages):
        logger.info("chat_history_trimmed", dropped=len(messages) - len(kept), kept=len(kept))
    return [{"role": m.role, "content": m.content} for m in kept]


def attach_file(
    messages: list[dict[str, Any]], payload: ProcessedFile
) -> list[dict[str, Any]]:
    """
    Merge a processed attachment into the first user turn after the system turn.

    Images turn the text content into a multi-part [text, image_url] array;
    documents append the extracted text. When no user turn exists at index > 0
    the attachment is dropped and the turns are returned unmodified.
    """
    target = next(
        (i for i, m in enumerate(messages) if i > 0 and m.get("role") == "user"),
        None,
    )
    if target is None:
        logger.warning("chat_file_dropped", kind=payload.kind, reason="no user turn")
        return messages

    updated = list(messages)
    turn = dict(updated[target])
    text = turn.get("content") or ""

    if isinstance(payload, ImagePayload):
        turn["content"] = [
            {"type": "text", "text": f"{text}\n\n{IMAGE_ANALYSIS_INSTRUCTIONS}"},
            {"type": "image_url", "image_url": {"url": payload.data_url}},
        ]
    else:
        name = payload.original_name or "document"
        turn["content"] = (
            f"{text}\n\n"
            f"--- Attached document: {name} ({payload.page_count} pages) ---\n"
            f"{payload.text}\n"
            f"--- End of document ---\n\n"
            f"{DOCUMENT_ANALYSIS_INSTRUCTIONS}"
        )

    updated[target] = turn
    return updated


def _assistant_turn(message: Any) -> dict[str, Any]:
    """Provider message object → assistant turn dict, keeping the call signature intact."""
    turn: dict[str, Any] = {"role": "assistant", "content": message.content}
    if message.function_call is not None:
        turn["function_call"] = {
            "name": message.function_call.name,
            "arguments": message.function_call.arguments,
        }
    return turn


def _add_usage(total: TokenUsage | None, usage: Any) -> TokenUsage | None:
    if usage is None:
        return total
    total = total or TokenUsage()
    return TokenUsage(
        prompt_tokens=total.prompt_tokens + (usage.prompt_tokens or 0),
        completion_tokens=total.completion_tokens + (usage.completion_tokens or 0),
        total_tokens=total.total_tokens + (usage.total_tokens or 0),
    )


# ---------------------------------------------------------------------------
# Nodes
# ---------------------------------------------------------------------------


async def prepare_node(
    state: GraphState,
    *,
    repository: PropertyRepository,
    assembler: PromptAssembler,
    config: OrchestratorConfig,
) -> GraphState:
    """
    Build the turn list: fresh system prompt first, then the prior turns.

    Rooms and inventory are re-read on every request; nothing is cached.
    """
    property_id = state["property_id"]
    rooms = await repository.list_rooms(property_id)
    inventory = await repository.list_available_inventory(property_id)
    logger.info(
        "chat_context_loaded",
        property_id=property_id,
        rooms=len(rooms),
        inventory_items=len(inventory),
    )

    system_prompt = assembler.build(rooms, inventory_context(inventory))
    messages = [{"role": "system", "content": system_prompt}]
    messages += trim_history(state["history"], config.max_history_turns)

    file = state.get("file")
    if file is not None:
        messages = attach_file(messages, file)

    return {**state, "messages": messages, "function_call_count": 0, "usage": None}


async def call_model_node(
    state: GraphState,
    *,
    client: AsyncOpenAI,
    config: OrchestratorConfig,
) -> GraphState:
    """Send the full turn list plus the function catalog to the model."""
    try:
        response = await client.chat.completions.create(
            model=config.model,
            messages=state["messages"],
            functions=FUNCTION_CATALOG,
            function_call="auto",
            temperature=config.temperature,
            max_tokens=config.max_tokens,
        )
    except Exception as e:
        logger.error("chat_model_call_failed", error=str(e))
        raise ModelProviderError(str(e)) from e

    if not getattr(response, "choices", None):
        logger.error("chat_model_response_malformed", detail="no choices")
        raise ModelProviderError("Model returned no choices")

    message = response.choices[0].message
    turn = _assistant_turn(message)
    logger.info(
        "chat_model_response",
        function_call=turn.get("function_call", {}).get("name"),
        finish_reason=response.choices[0].finish_reason,
    )

    return {
        **state,
        "last_message": turn,
        "usage": _add_usage(state.get("usage"), getattr(response, "usage", None)),
    }


async def execute_function_node(state: GraphState, *, executors: FunctionExecutors) -> GraphState:
    """Run the requested function and append exactly two turns: the call, then its result."""
    call_turn = state["last_message"]
    function_call = call_turn["function_call"]
    name = function_call["name"]

    result = await executors.execute(name, function_call.get("arguments"), state["property_id"])
    count = state["function_call_count"] + 1
    logger.info(
        "function_call_executed",
        function=name,
        call_number=count,
        failed="error" in result,
    )

    result_turn = {"role": "function", "name": name, "content": json.dumps(result, default=str)}
    return {
        **state,
        "messages": state["messages"] + [call_turn, result_turn],
        "function_call_count": count,
    }


# ---------------------------------------------------------------------------
# Routing
# ---------------------------------------------------------------------------


def should_continue(state: GraphState, *, max_function_calls: int) -> str:
    """Route from call_model: execute the requested function, or finish."""
    last = state.get("last_message") or {}
    if "function_call" not in last:
        return END
    if state["function_call_count"] >= max_function_calls:
        logger.warning(
            "function_call_ceiling_reached",
            ceiling=max_function_calls,
            pending_function=last["function_call"]["name"],
        )
        return END
    return "execute_function"


# ---------------------------------------------------------------------------
# Graph construction
# ---------------------------------------------------------------------------


def build_chat_graph(
    client: AsyncOpenAI,
    repository: PropertyRepository,
    executors: FunctionExecutors,
    assembler: PromptAssembler,
    config: OrchestratorConfig,
):
    """
    Build and compile the chat orchestration graph.

    Services are bound into the nodes here; per-request data (property id,
    history, file) travels in the graph state.

    Returns:
        Compiled LangGraph ready for async invocation.
    """
    graph = StateGraph(dict)

    async def prepare(state: GraphState) -> GraphState:
        return await prepare_node(state, repository=repository, assembler=assembler, config=config)

    async def call_model(state: GraphState) -> GraphState:
        return await call_model_node(state, client=client, config=config)

    async def execute_function(state: GraphState) -> GraphState:
        return await execute_function_node(state, executors=executors)

    def route(state: GraphState) -> str:
        return should_continue(state, max_function_calls=config.max_function_calls)

    graph.add_node("prepare", prepare)
    graph.add_node("call_model", call_model)
    graph.add_node("execute_function", execute_function)

    graph.set_entry_point("prepare")
    graph.add_edge("prepare", "call_model")
    graph.add_conditional_edges(
        "call_model",
        route,
        {"execute_function": "execute_function", END: END},
    )
    graph.add_edge("execute_function", "call_model")

    return graph.compile()


class ChatOrchestrator:
    """Drives one bounded function-calling exchange per chat request."""

    def __init__(
        self,
        client: AsyncOpenAI,
        repository: PropertyRepository,
        config: OrchestratorConfig | None = None,
        knowledge_base: str = AV_KNOWLEDGE_BASE,
    ):
        self.client = client
        self.repository = repository
        self.config = config or OrchestratorConfig()
        self.assembler = PromptAssembler(knowledge_base)
        self.executors = FunctionExecutors(repository)
        self.graph = build_chat_graph(
            client, repository, self.executors, self.assembler, self.config
        )

    async def process_conversation(
        self,
        messages: list[ChatMessage],
        property_id: int,
        file: ProcessedFile | None = None,
    ) -> ConversationResult:
        """
        Run the loop for one request.

        Raises:
            ModelProviderError: Any model call failed; no partial result.
        """
        initial_state: GraphState = {
            "property_id": property_id,
            "history": messages,
            "file": file,
        }
        # prepare + first call + two steps per function call, with headroom
        recursion_limit = 2 * self.config.max_function_calls + 5

        final_state = await self.graph.ainvoke(
            initial_state, config={"recursion_limit": recursion_limit}
        )

        last = final_state.get("last_message") or {}
        result = ConversationResult(
            message=last.get("content"),
            usage=final_state.get("usage"),
            function_call_count=final_state.get("function_call_count", 0),
        )
        logger.info(
            "chat_conversation_completed",
            property_id=property_id,
            function_call_count=result.function_call_count,
            unresolved_function_call="function_call" in last,
        )
        return result
