"""
Context Store
=============

An in-memory vector index over the document corpus.

The corpus is small (a handful of markdown guides) and fixed for the life
of the process, so the store is built once at startup and never changes:

1. Every document is embedded through the embedding provider
2. The vectors are stacked into one numpy matrix
3. A query is embedded and compared to every row by cosine similarity
4. The top-k rows are returned, best first

Cosine Similarity:
    cos(A, B) = (A · B) / (||A|| * ||B||)

Ties are broken by corpus order, so results are stable across runs. Because
nothing is mutated after build, any number of concurrent queries can share
one store.
"""

from dataclasses import dataclass
from typing import Protocol, Sequence

import numpy as np

from askbot.errors import EmbeddingError
from askbot.utils.logger import Logger

logger = Logger("ContextStore")


class Embedder(Protocol):
    """Anything that can embed text (EmbeddingGenerator in production)."""

    async def generate(self, text: str) -> list[float]: ...

    async def generate_batch(self, texts: Sequence[str]) -> list[list[float]]: ...


@dataclass(frozen=True)
class Document:
    """
    A corpus document and its embedding.

    Attributes:
        id: Stable identifier ("doc-<position>")
        text: The document text
        embedding: Provider vector, same dimension for every document
    """
    id: str
    text: str
    embedding: tuple[float, ...]


@dataclass(frozen=True)
class ScoredDocument:
    """A document returned from a query, with its similarity score."""
    document: Document
    score: float

    @property
    def id(self) -> str:
        return self.document.id

    @property
    def text(self) -> str:
        return self.document.text


class ContextStore:
    """
    Read-only nearest-neighbour index over an embedded corpus.

    Build it with the async factory, not the constructor:

        store = await ContextStore.build(texts, embedder)
        results = await store.query("how do tools work?", k=2)
        for r in results:
            print(r.score, r.text[:80])
    """

    def __init__(
        self,
        documents: Sequence[Document],
        embedder: Embedder
    ):
        self._documents: tuple[Document, ...] = tuple(documents)
        self._embedder = embedder

        if self._documents:
            matrix = np.array([doc.embedding for doc in self._documents], dtype=float)
            norms = np.linalg.norm(matrix, axis=1)
            self._matrix = matrix
            self._norms = norms
            self.dimension = matrix.shape[1]
        else:
            self._matrix = np.empty((0, 0))
            self._norms = np.empty(0)
            self.dimension = 0

    @classmethod
    async def build(
        cls,
        texts: Sequence[str],
        embedder: Embedder
    ) -> "ContextStore":
        """
        Embed every text and return a ready store.

        Either every document is embedded or the build fails; a partial
        store is never returned.

        Args:
            texts: Document texts in corpus order
            embedder: Embedding provider

        Raises:
            EmbeddingError: If the provider fails or returns inconsistent vectors
        """
        texts = list(texts)
        logger.info(f"Embedding {len(texts)} documents")

        vectors = await embedder.generate_batch(texts)

        if len(vectors) != len(texts):
            raise EmbeddingError(
                f"Expected {len(texts)} embeddings, got {len(vectors)}"
            )

        dimensions = {len(v) for v in vectors}
        if len(dimensions) > 1:
            raise EmbeddingError(
                f"Embeddings have inconsistent dimensions: {sorted(dimensions)}"
            )
        if 0 in dimensions:
            raise EmbeddingError("Provider returned an empty embedding")

        documents = [
            Document(id=f"doc-{i}", text=text, embedding=tuple(float(x) for x in vector))
            for i, (text, vector) in enumerate(zip(texts, vectors))
        ]

        store = cls(documents, embedder)
        logger.info(f"Context store ready ({len(store)} documents, dim={store.dimension})")
        return store

    async def query(self, text: str, k: int) -> list[ScoredDocument]:
        """
        Return up to k documents most similar to the text.

        Raises:
            EmbeddingError: If the query cannot be embedded
        """
        if k <= 0 or not self._documents:
            return []

        vector = await self._embedder.generate(text)
        return self.rank(vector, k)

    def rank(self, vector: Sequence[float], k: int) -> list[ScoredDocument]:
        """
        Rank the corpus against an already-embedded query.

        Returns at most k documents sorted by descending cosine similarity,
        corpus order breaking ties.
        """
        if k <= 0 or not self._documents:
            return []

        query = np.asarray(vector, dtype=float)
        if query.shape != (self.dimension,):
            raise EmbeddingError(
                f"Query embedding has dimension {query.size}, store expects {self.dimension}"
            )

        query_norm = np.linalg.norm(query)
        denominators = self._norms * query_norm
        dots = self._matrix @ query

        # Zero-norm vectors have no direction; score them 0
        with np.errstate(divide="ignore", invalid="ignore"):
            scores = np.where(denominators == 0, 0.0, dots / denominators)

        # Stable sort on the negated scores keeps corpus order for ties
        order = np.argsort(-scores, kind="stable")[:k]

        return [
            ScoredDocument(document=self._documents[i], score=float(scores[i]))
            for i in order
        ]

    @property
    def documents(self) -> tuple[Document, ...]:
        return self._documents

    def __len__(self) -> int:
        return len(self._documents)
