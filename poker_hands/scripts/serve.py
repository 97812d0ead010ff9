#!/usr/bin/env python
"""HTTP service exposing the hand classifier.

Endpoints:
- POST /api/evaluate        {"hand": [{"rank": 1, "suit": "heart"}, ...]}
- POST /api/evaluate/batch  {"hands": [[...], [...]]}
- GET  /api/categories      category labels, highest precedence first
- GET  /api/categories/{label}  one category by label (404 if unknown)

Malformed hands get HTTP 400 with the failed check in "reason", the card
position in "index" and, for batches, the hand position in "hand".

Environment:
    POKER_HANDS_HOST       bind address (default 0.0.0.0)
    POKER_HANDS_PORT       port (default 8000)
    POKER_HANDS_API_TOKEN  if set, /api requests need a matching X-API-Token header

Usage:
    python -m poker_hands.scripts.serve
    python -m poker_hands.scripts.serve --host 127.0.0.1 --port 9000
"""

import argparse
import os
from typing import Any, List, Optional

import uvicorn
from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from poker_hands import __version__
from poker_hands.rules import (
    CATEGORY_PRECEDENCE,
    Category,
    InvalidHandError,
    classify_hand,
    describe_categories,
)
from poker_hands.rules.batch import BatchHandClassifier


class CardModel(BaseModel):
    # Left untyped so bad values reach validate_hand and get its error reasons
    rank: Any = None
    suit: Any = None


class EvaluateRequest(BaseModel):
    hand: List[CardModel]


class BatchEvaluateRequest(BaseModel):
    hands: List[List[CardModel]]


def _to_cards(hand: List[CardModel]) -> List[dict]:
    return [{"rank": c.rank, "suit": c.suit} for c in hand]


def create_app(api_token: Optional[str] = None) -> FastAPI:
    """Build the FastAPI application.

    Args:
        api_token: If given, /api requests must send it as X-API-Token
    """
    app = FastAPI(title="Poker Hands", version=__version__)
    classifier = BatchHandClassifier()
    descriptions = describe_categories()

    @app.middleware("http")
    async def token_middleware(request: Request, call_next):
        if api_token and request.url.path.startswith("/api"):
            if request.headers.get("X-API-Token") != api_token:
                return JSONResponse(status_code=401, content={"detail": "Unauthorized"})
        return await call_next(request)

    @app.exception_handler(InvalidHandError)
    async def invalid_hand_handler(request: Request, exc: InvalidHandError):
        return JSONResponse(
            status_code=400,
            content={
                "detail": str(exc),
                "reason": exc.reason.value,
                "index": exc.index,
                "hand": exc.hand,
            },
        )

    @app.post("/api/evaluate")
    def evaluate(req: EvaluateRequest):
        category = classify_hand(_to_cards(req.hand))
        return {"category": category.label, "precedence": int(category)}

    @app.post("/api/evaluate/batch")
    def evaluate_batch(req: BatchEvaluateRequest):
        categories = classifier.classify_hands([_to_cards(h) for h in req.hands])
        return {"categories": [c.label for c in categories]}

    @app.get("/api/categories")
    def categories():
        return {
            "categories": [
                {"label": c.label, "precedence": int(c), "description": descriptions[c]}
                for c in CATEGORY_PRECEDENCE
            ]
        }

    @app.get("/api/categories/{label}")
    def category(label: str):
        try:
            c = Category.from_label(label)
        except ValueError as e:
            raise HTTPException(status_code=404, detail=str(e))
        return {"label": c.label, "precedence": int(c), "description": descriptions[c]}

    return app


app = create_app(api_token=os.getenv("POKER_HANDS_API_TOKEN"))


def main(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(description="Serve the poker hand classifier over HTTP")
    parser.add_argument("--host", default=os.getenv("POKER_HANDS_HOST", "0.0.0.0"))
    parser.add_argument("--port", type=int, default=int(os.getenv("POKER_HANDS_PORT", "8000")))
    args = parser.parse_args(argv)

    print(f"Starting server at http://{args.host}:{args.port}")
    try:
        uvicorn.run(app, host=args.host, port=args.port)
    except KeyboardInterrupt:
        pass


if __name__ == "__main__":
    main()
