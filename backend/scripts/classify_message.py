#!/usr/bin/env python3
"""
Classify user messages from the command line.

Each message is printed as one JSON object per line.

Usage:
  cd backend
  export OPENAI_API_KEY="sk-..."   # or .env
  PYTHONPATH=. python scripts/classify_message.py "Quero sair dessa lista!"

  One message per stdin line:
  PYTHONPATH=. python scripts/classify_message.py - < messages.txt

  Local run without a real model (hard rules + canned mock answer):
  AI_CLASSIFY_PROVIDER=mock PYTHONPATH=. python scripts/classify_message.py "Qual o valor?"

Exit status 2 when the model fallback is unavailable for any message.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys

# Run from repo root or backend; ensure backend is on path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from triagem.core.config import get_settings
from triagem.services.ai.classify import ClassificationPipeline, ModelFallbackAdapter, ModelUnavailable
from triagem.services.ai.common.providers import ProviderNotConfigured, get_provider

logger = logging.getLogger("classify_message")


def _read_messages(args: argparse.Namespace) -> list[str]:
    if args.messages == ["-"]:
        return [line.rstrip("\n") for line in sys.stdin if line.strip()]
    return args.messages


def _build_pipeline(args: argparse.Namespace) -> ClassificationPipeline:
    if args.provider:
        provider = get_provider(args.provider)
        adapter = ModelFallbackAdapter(provider, model=args.model or "", timeout_seconds=args.timeout)
    else:
        adapter = ModelFallbackAdapter(timeout_seconds=args.timeout)
    return ClassificationPipeline(model_fallback=adapter)


async def _run(pipeline: ClassificationPipeline, messages: list[str]) -> int:
    status = 0
    for message in messages:
        try:
            result = await pipeline.classify(message)
        except ModelUnavailable as exc:
            logger.error("Model unavailable for message: %s", exc.reason)
            print(json.dumps({"error": "model_unavailable", "detail": exc.reason}, ensure_ascii=False))
            status = 2
            continue
        print(json.dumps(result.to_dict(), ensure_ascii=False))
    return status


def main() -> None:
    parser = argparse.ArgumentParser(description="Classify user messages into intents.")
    parser.add_argument("messages", nargs="+", help="Messages to classify, or '-' to read one per stdin line.")
    parser.add_argument("--provider", help="Provider name (openai, claude, groq, mock); defaults to AI_CLASSIFY_PROVIDER.")
    parser.add_argument("--model", help="Model name for --provider.")
    parser.add_argument("--timeout", type=float, default=None, help="Model call timeout in seconds.")
    args = parser.parse_args()
    if args.model and not args.provider:
        parser.error("--model requires --provider")

    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    try:
        pipeline = _build_pipeline(args)
    except ProviderNotConfigured as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(2)

    sys.exit(asyncio.run(_run(pipeline, _read_messages(args))))


if __name__ == "__main__":
    main()
