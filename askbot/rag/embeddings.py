"""
Embedding Generation
====================

Turns text into vectors with OpenAI's embedding models. The ContextStore
uses it twice: once at startup for every corpus document, and once per
prompt for the user's query.

    "What is Rig?"                  → [0.02, -0.15, 0.89, ...]
    "Explain the Rig library to me" → [0.03, -0.14, 0.87, ...]

Any provider failure is raised as EmbeddingError so callers deal with a
single exception type regardless of what went wrong on the wire.
"""

from typing import Sequence

from openai import AsyncOpenAI, OpenAIError

from askbot.errors import EmbeddingError
from askbot.utils.logger import Logger

logger = Logger("Embeddings")


class EmbeddingGenerator:
    """
    Generates text embeddings using OpenAI's API.

    Example:
        generator = EmbeddingGenerator(api_key="sk-...")

        vector = await generator.generate("How do I build an agent?")
        vectors = await generator.generate_batch(["doc one", "doc two"])
    """

    # Inputs per embeddings request; the API caps a single call at 2048
    BATCH_SIZE = 100

    def __init__(
        self,
        api_key: str | None = None,
        model: str = "text-embedding-3-small",
        client: AsyncOpenAI | None = None
    ):
        """
        Args:
            api_key: OpenAI API key (ignored when client is given)
            model: Embedding model to use
            client: Pre-built client, mainly for tests
        """
        self.client = client if client is not None else AsyncOpenAI(api_key=api_key)
        self.model = model

        logger.info(f"Embedding generator initialized with model: {model}")

    async def generate(self, text: str) -> list[float]:
        """
        Embed a single text.

        Raises:
            EmbeddingError: If the provider call fails
        """
        vectors = await self._create([text])
        logger.debug(f"Generated embedding (dim={len(vectors[0])})")
        return vectors[0]

    async def generate_batch(self, texts: Sequence[str]) -> list[list[float]]:
        """
        Embed many texts, preserving input order.

        Raises:
            EmbeddingError: If any provider call fails
        """
        if not texts:
            return []

        vectors: list[list[float]] = []
        for start in range(0, len(texts), self.BATCH_SIZE):
            chunk = list(texts[start:start + self.BATCH_SIZE])
            logger.debug(f"Embedding batch of {len(chunk)} texts")
            vectors.extend(await self._create(chunk))

        return vectors

    async def _create(self, inputs: list[str]) -> list[list[float]]:
        try:
            response = await self.client.embeddings.create(
                model=self.model,
                input=inputs
            )
        except OpenAIError as e:
            raise EmbeddingError(f"Embedding request failed: {e}") from e

        # The API may return items out of order; index is authoritative
        data = sorted(response.data, key=lambda item: item.index)
        if len(data) != len(inputs):
            raise EmbeddingError(
                f"Expected {len(inputs)} embeddings, provider returned {len(data)}"
            )
        return [list(item.embedding) for item in data]
