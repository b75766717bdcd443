"""LLM agent that answers trend questions using the two collectors as tools.

The model runs locally through Ollama.  Tools never raise: a failed fetch
comes back to the model as ``{"error": "..."}`` so the conversation can
continue.
"""

import argparse
import json
import logging
from typing import Any, Callable, Dict, List, Optional, Sequence

from langchain_core.messages import (
    AIMessage,
    BaseMessage,
    HumanMessage,
    SystemMessage,
    ToolMessage,
)
from langchain_core.tools import StructuredTool
from langchain_ollama import ChatOllama
from pydantic import BaseModel, Field

from trend_sheets import setup_logging
from trend_sheets.google_trends import fetch_google_trends
from trend_sheets.scraper import fetch_trending_tweets

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "llama3.2"
DEFAULT_QUESTION = "Hello, whats trending on google in india?"
NO_ANSWER = "The model did not produce an answer."

SYSTEM_PROMPT = (
    "You are a helpful assistant that can fetch the latest trends of "
    "twitter and google of a given country in the last 24 hours.\n"
    "You have access to two tools:\n"
    "1. get_twitter_trends: the latest twitter trends of a given country\n"
    "2. get_google_trends: the latest google trends of a given country"
)


def _run_tool(fetch: Callable[[str], list], country: str) -> str:
    try:
        return json.dumps(fetch(country))
    except Exception as exc:
        logger.warning("Tool fetch for '%s' failed: %s", country, exc)
        return json.dumps({"error": str(exc) or "Failed to fetch trends"})


def get_twitter_trends(country: str) -> str:
    """Get the latest trends of twitter of given country in 24 hours."""
    return _run_tool(fetch_trending_tweets, country)


def get_google_trends(country: str) -> str:
    """Get the latest trends of google of given country in 24 hours."""
    return _run_tool(fetch_google_trends, country)


twitter_trends_tool = StructuredTool.from_function(
    func=get_twitter_trends,
    name="get_twitter_trends",
    description="Get the latest trends of twitter of given country in "
                "24 hours. Input is the country name.",
)

google_trends_tool = StructuredTool.from_function(
    func=get_google_trends,
    name="get_google_trends",
    description="Get the latest trends of google of given country in "
                "24 hours. Input should be a country name (e.g. 'India', "
                "'USA') or code.",
)

TOOLS: List[StructuredTool] = [twitter_trends_tool, google_trends_tool]


class TrendItem(BaseModel):
    query: str = Field(..., description="The query")
    search_volume: int = Field(..., description="The search volume")


class TrendAnswer(BaseModel):
    """Structured final answer of the agent."""

    humour_response: str = Field(
        ..., description="A humorous response to the user's query")
    trends: List[TrendItem] = Field(..., description="The trends")


class TrendAgent:
    """Tool-calling loop around a local chat model.

    Args:
        model: Ollama model name.
        temperature: Sampling temperature.
        max_steps: Maximum number of model turns before giving up on
            further tool calls.
        llm: Chat model to use instead of a new :class:`ChatOllama`.
    """

    def __init__(self, model: str = DEFAULT_MODEL, temperature: float = 0,
                 max_steps: int = 5, llm: Optional[Any] = None) -> None:
        self.llm = llm or ChatOllama(model=model, temperature=temperature)
        self.llm_with_tools = self.llm.bind_tools(TOOLS)
        self.tools_map: Dict[str, StructuredTool] = {
            tool.name: tool for tool in TOOLS
        }
        self.max_steps = max_steps

    def _converse(self, question: str) -> List[BaseMessage]:
        messages: List[BaseMessage] = [
            SystemMessage(content=SYSTEM_PROMPT),
            HumanMessage(content=question),
        ]

        for step in range(self.max_steps):
            ai_msg: AIMessage = self.llm_with_tools.invoke(messages)
            messages.append(ai_msg)
            if not ai_msg.tool_calls:
                break

            for call in ai_msg.tool_calls:
                logger.info("Step %d: calling %s(%s)", step + 1,
                            call["name"], call["args"])
                tool = self.tools_map.get(call["name"])
                if tool is None:
                    result = json.dumps(
                        {"error": f"Unknown tool: {call['name']}"})
                else:
                    try:
                        result = tool.invoke(call["args"])
                    except Exception as exc:
                        logger.warning("Tool call %s rejected: %s",
                                       call["name"], exc)
                        result = json.dumps({"error": (
                            f"Invalid arguments for {call['name']}: {exc}")})
                messages.append(
                    ToolMessage(content=result, tool_call_id=call["id"]))
        else:
            logger.warning("Agent used all %d steps; asking for a final "
                           "answer without tools", self.max_steps)
            messages.append(self.llm.invoke(messages))

        return messages

    def ask(self, question: str) -> str:
        """Answer *question*, calling tools as the model requests.

        Returns:
            The text of the last model message, or a fallback notice if
            the model produced no text.
        """
        messages = self._converse(question)
        last = messages[-1]
        if isinstance(last, AIMessage) and last.content:
            return last.content
        return NO_ANSWER

    def ask_structured(self, question: str) -> TrendAnswer:
        """Answer *question* and return the result as :class:`TrendAnswer`."""
        messages = self._converse(question)
        structured_llm = self.llm.with_structured_output(TrendAnswer)
        return structured_llm.invoke(messages)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Console entry point for ``trend-sheets-agent``."""
    parser = argparse.ArgumentParser(
        description="Ask a local LLM what is trending.")
    parser.add_argument("question", nargs="?", default=DEFAULT_QUESTION)
    parser.add_argument("--model", default=DEFAULT_MODEL)
    parser.add_argument("--structured", action="store_true",
                        help="print the answer as TrendAnswer JSON")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args(argv)

    setup_logging(args.log_level)
    logger.info("Agent is running...")
    trend_agent = TrendAgent(model=args.model)
    if args.structured:
        print(trend_agent.ask_structured(args.question).model_dump_json(
            indent=2))
    else:
        print(trend_agent.ask(args.question))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
