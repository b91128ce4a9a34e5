# =============================================================================
# File: cli.py
# Date: 2026-10-18
# Copyright (c) 2024 Goutam Malakar. All rights reserved.
# =============================================================================

import argparse
import json
import math
import sys
from typing import List, Optional

from embedrank.config.registry import ModelRegistry, RerankModelRegistry
from embedrank.exceptions import EmbedRankBaseException
from embedrank.logger import get_logger

logger = get_logger("cli")


def _progress(message: str) -> None:
    print(message, file=sys.stderr)


def cmd_models(args: argparse.Namespace) -> int:
    for title, registry in (
        ("Embedding models", ModelRegistry.load_default()),
        ("Rerank models", RerankModelRegistry.load_default()),
    ):
        print(f"{title}:")
        for alias in registry.aliases():
            config = registry.models[alias]
            marker = "*" if alias == registry.default_model else " "
            print(f" {marker} {alias:<14} {config.name} ({config.provider})")
    return 0


def cmd_embed(args: argparse.Namespace) -> int:
    from embedrank.services.embedder import create_embedder

    embedder = create_embedder(args.model, progress_callback=_progress)
    vectors = embedder.embed(args.texts)
    summary = [
        {
            "text": text,
            "dimension": len(vector),
            "norm": round(math.sqrt(sum(v * v for v in vector)), 6),
        }
        for text, vector in zip(args.texts, vectors)
    ]
    print(json.dumps({"model": embedder.model_name(), "results": summary}, indent=2, ensure_ascii=False))
    return 0


def cmd_rerank(args: argparse.Namespace) -> int:
    from embedrank.services.reranker import create_reranker, sort_by_score

    reranker = create_reranker(args.model, progress_callback=_progress)
    results = reranker.rerank(args.query, args.documents)
    if args.sort:
        results = sort_by_score(results)
    payload = {
        "model": reranker.model_name(),
        "results": [{"document": r.document, "score": r.score} for r in results],
    }
    print(json.dumps(payload, indent=2, ensure_ascii=False))
    return 0


def cmd_serve(args: argparse.Namespace) -> int:
    from embedrank.main import run_server

    run_server(host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="embedrank", description="ONNX text embeddings and reranking"
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    models = sub.add_parser("models", help="List registered model aliases")
    models.set_defaults(func=cmd_models)

    embed = sub.add_parser("embed", help="Embed texts and print vector dimensions and norms")
    embed.add_argument("texts", nargs="+", help="Texts to embed")
    embed.add_argument("--model", default=None, help="Alias or model identifier")
    embed.set_defaults(func=cmd_embed)

    rerank = sub.add_parser("rerank", help="Score documents against a query")
    rerank.add_argument("query", help="Query text")
    rerank.add_argument("documents", nargs="+", help="Candidate documents")
    rerank.add_argument("--model", default=None, help="Rerank alias or model identifier")
    rerank.add_argument("--sort", action="store_true", help="Most relevant first")
    rerank.set_defaults(func=cmd_rerank)

    serve = sub.add_parser("serve", help="Run the HTTP API with uvicorn")
    serve.add_argument("--host", default=None, help="Bind address (default: from settings)")
    serve.add_argument("--port", type=int, default=None, help="Port (default: from settings)")
    serve.set_defaults(func=cmd_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except EmbedRankBaseException as e:
        logger.error("%s: %s", e.error_code, e.message)
        print(f"error: {e.message}", file=sys.stderr)
        return 1
