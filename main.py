#!/usr/bin/env python3
"""
StudyMate Demo Application

Ingests one file and answers one question against it, using in-memory
stores and the AI gateway configured through the environment (.env).

    python main.py notes.pdf "What is photosynthesis?"
"""

import argparse
import asyncio
import logging
import mimetypes
import sys
from pathlib import Path

from studymate import (
    Document,
    DocumentStatus,
    InMemoryEntityStore,
    Question,
    SourceFile,
    StudyAssistant,
)
from studymate.config import settings
from studymate.errors import StudyMateError

# Setup basic logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger("main")


def load_source(path: Path) -> SourceFile:
    content_type = mimetypes.guess_type(path.name)[0] or "application/octet-stream"
    return SourceFile(filename=path.name, content=path.read_bytes(), content_type=content_type)


async def run(path: Path, question: str) -> int:
    assistant = StudyAssistant.from_settings(
        settings,
        documents=InMemoryEntityStore(Document),
        questions=InMemoryEntityStore(Question),
    )

    logger.info("--- Phase 1: Ingestion ---")
    try:
        doc = await assistant.upload(load_source(path))
    except StudyMateError as e:
        logger.error(f"Ingestion failed: {e}")
        return 1

    logger.info(f"Document '{doc.title}' is {doc.status} ({len(doc.extracted_text)} characters)")
    if doc.status != DocumentStatus.COMPLETED:
        logger.error("No text could be extracted; nothing to ask about.")
        return 1

    logger.info("--- Phase 2: Question ---")
    logger.info(f"Question: '{question}'")
    try:
        result = await assistant.ask(question)
    except StudyMateError as e:
        logger.error(f"Answering failed: {e}")
        return 1

    print()
    print(result.answer)
    print()
    logger.info(f"Confidence: {result.confidence or 'unknown'}")
    logger.info("Demo complete!")
    return 0


def main() -> int:
    parser = argparse.ArgumentParser(description="Ingest a study file and ask a question about it.")
    parser.add_argument("file", type=Path, help="PDF, image, DOCX, TXT or MD file")
    parser.add_argument("question", help="Question to ask about the file")
    args = parser.parse_args()

    if not args.file.is_file():
        parser.error(f"File not found: {args.file}")

    return asyncio.run(run(args.file, args.question))


if __name__ == "__main__":
    sys.exit(main())
