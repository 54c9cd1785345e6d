"""
Context Assembly
================

Builds the model input for one prompt:

    system:  preamble
             + retrieved documents (the RAG context)
    user:    the query

Tool definitions travel alongside the messages (see Agent.prompt), not
inside them.
"""

from dataclasses import dataclass, field

from askbot.rag import ScoredDocument
from askbot.utils.logger import Logger

logger = Logger("Context")

DEFAULT_PREAMBLE = """You are a helpful assistant answering questions in a team chat.

Key responsibilities:
1. Use the documents provided below when they are relevant, and say so when they don't cover the question.
2. Use the tools for live data. Most major coins trade on the Hyperliquid perpetuals market; the spot market only lists tokens native to Hyperliquid.
3. Keep answers short and clear. Use bullet points for complex information.
4. Format code with triple backticks and a language name."""


@dataclass
class AssembledContext:
    """
    The model input for one prompt.

    Attributes:
        system_message: Preamble plus retrieved context
        messages: The conversation (just the user query for a fresh prompt)
        documents: The documents that were injected
    """
    system_message: str
    messages: list[dict]
    documents: list[ScoredDocument] = field(default_factory=list)

    def to_openai_messages(self) -> list[dict]:
        result = [{"role": "system", "content": self.system_message}]
        result.extend(self.messages)
        return result


class ContextAssembler:
    """
    Formats the preamble, retrieved documents and query into messages.

    Example:
        assembler = ContextAssembler()
        context = assembler.assemble("what is Rig?", documents)
        messages = context.to_openai_messages()
    """

    def __init__(self, preamble: str = DEFAULT_PREAMBLE):
        self.preamble = preamble

    def assemble(self, query: str, documents: list[ScoredDocument]) -> AssembledContext:
        system_message = self.preamble
        rag_context = self._format_documents(documents)
        if rag_context:
            system_message = f"{system_message}\n\n{rag_context}"

        logger.debug(f"Assembled context with {len(documents)} documents")

        return AssembledContext(
            system_message=system_message,
            messages=[{"role": "user", "content": query}],
            documents=list(documents)
        )

    def _format_documents(self, documents: list[ScoredDocument]) -> str:
        if not documents:
            return ""

        lines = ["## Relevant Documents"]
        for doc in documents:
            lines.append(f'<document id="{doc.id}">')
            lines.append(doc.text)
            lines.append("</document>")

        return "\n".join(lines)
