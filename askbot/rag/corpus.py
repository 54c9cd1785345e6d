"""
Corpus Loading
==============

Reads the knowledge-base documents the ContextStore is built from. The
corpus is a directory of markdown files (guides, FAQs, examples); each
file becomes one document, in sorted filename order.
"""

from pathlib import Path

from askbot.utils.logger import Logger

logger = Logger("Corpus")


def load_documents(directory: Path, pattern: str = "*.md") -> list[str]:
    """
    Load the text of every file in a directory matching a glob pattern.

    Empty files are skipped. A missing directory is not an error: the bot
    simply runs without retrieved context.

    Args:
        directory: Directory to read
        pattern: Glob pattern for document files

    Returns:
        Document texts in sorted path order
    """
    if not directory.is_dir():
        logger.warning(f"Documents directory not found: {directory}")
        return []

    texts = []
    for path in sorted(directory.glob(pattern)):
        if not path.is_file():
            continue
        content = path.read_text(encoding="utf-8").strip()
        if not content:
            logger.debug(f"Skipping empty document: {path.name}")
            continue
        texts.append(content)
        logger.debug(f"Loaded {path.name} ({len(content)} chars)")

    logger.info(f"Loaded {len(texts)} documents from {directory}")
    return texts
