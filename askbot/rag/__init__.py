"""
RAG (Retrieval Augmented Generation)
====================================

Grounds the model's answers in a small document corpus:

1. At startup every document is embedded (embeddings.py) and indexed
   (store.py)
2. For each prompt the query is embedded and the closest documents are
   retrieved
3. The retrieved text is injected into the model's input

Components:
- embeddings.py: OpenAI embedding calls
- store.py: immutable in-memory cosine-similarity index
- corpus.py: loading the document texts from disk
"""

from askbot.rag.corpus import load_documents
from askbot.rag.embeddings import EmbeddingGenerator
from askbot.rag.store import ContextStore, Document, ScoredDocument

__all__ = [
    "ContextStore",
    "Document",
    "ScoredDocument",
    "EmbeddingGenerator",
    "load_documents",
]
