# services/debate_engine.py
import logging
from typing import Any, Dict, List, Optional

from openai import AsyncOpenAI

logger = logging.getLogger(__name__)

DEBATE_MODEL = "gpt-4o-mini"

# Every round asks for 100-200 words; sampling is the same for all three.
ROUND_SETTINGS: Dict[str, Dict[str, Any]] = {
    "opening": {"temperature": 0.8, "max_tokens": 300},
    "rebuttal": {"temperature": 0.8, "max_tokens": 300},
    "closing": {"temperature": 0.8, "max_tokens": 300},
}


def _side_of(msg: Any) -> Optional[str]:
    if isinstance(msg, dict):
        return msg.get("side")
    return getattr(msg, "side", None)


def _content_of(msg: Any) -> str:
    if isinstance(msg, dict):
        return (msg.get("content") or "").strip()
    return (getattr(msg, "content", "") or "").strip()


class DebateEngine:
    """
    Writes one round's argument for one side of a topic.

    Only the messages of the current round are used as context; there is no
    memory across rounds and no retry, timeout or caching here.
    """

    def __init__(self, async_client: AsyncOpenAI, *, model: str = DEBATE_MODEL):
        self.async_client = async_client
        self.model = model

    async def generate_response(
        self,
        messages: List[Dict[str, Any]],
        *,
        temperature: float = 0.8,
        max_tokens: int = 300,
    ) -> str:
        res = await self.async_client.chat.completions.create(
            model=self.model,
            messages=messages,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        return (res.choices[0].message.content or "").strip()

    def build_context(self, side: str, previous_messages: List[Any]) -> str:
        """Label each earlier argument as ours or the opponent's."""
        lines = []
        for msg in previous_messages or []:
            content = _content_of(msg)
            if not content:
                continue
            label = "Your previous argument" if _side_of(msg) == side else "Opponent's argument"
            lines.append(f"{label}: {content}")
        return "\n\n".join(lines)

    def build_round_prompt(
        self,
        *,
        side: str,
        round_type: str,
        topic: str,
        previous_messages: Optional[List[Any]] = None,
    ) -> List[Dict[str, str]]:
        context = self.build_context(side, previous_messages or [])
        intro = (
            f"You are participating in a formal debate. You are arguing the {side} side "
            f"of the topic: \"{topic}\".\n"
        )
        context_block = f"Context of previous arguments:\n{context}\n\n" if context else ""

        if round_type == "opening":
            task = (
                "This is your opening statement. Present your strongest arguments clearly and persuasively.\n"
                "Keep your response between 100-200 words. Be respectful but passionate about your position."
            )
        elif round_type == "rebuttal":
            task = (
                "This is your rebuttal round. Address the opponent's arguments and strengthen your position.\n"
                + context_block
                + "Keep your response between 100-200 words. Be analytical and counter opposing points."
            )
        elif round_type == "closing":
            task = (
                "This is your closing statement. Summarize your strongest points and make a compelling final argument.\n"
                + context_block
                + "Keep your response between 100-200 words. Be persuasive and conclusive."
            )
        else:
            raise ValueError("Invalid round type. Must be 'opening', 'rebuttal', or 'closing'.")

        return [
            {"role": "system", "content": intro + task},
            {"role": "user", "content": f"Generate a {round_type} argument for the {side} side of: \"{topic}\""},
        ]

    async def generate_argument(
        self,
        *,
        side: str,
        round_type: str,
        topic: str,
        previous_messages: Optional[List[Any]] = None,
    ) -> str:
        messages = self.build_round_prompt(
            side=side, round_type=round_type, topic=topic, previous_messages=previous_messages
        )
        params = ROUND_SETTINGS[round_type]
        logger.debug("Generating %s argument for %s side on %r", round_type, side, topic)
        return await self.generate_response(messages, **params)
