"""research-agent - summaries and research synthesis

Simple CLI around the three entrypoints. Prints the response envelope as JSON.
`serve` runs the HTTP API instead.
"""

import argparse
import asyncio
import json
import sys

from research_agent.agents.orchestrator import ResearchOrchestrator
from research_agent.config import get_settings


def build_payload(args: argparse.Namespace) -> tuple[str, dict]:
    if args.command == "summarize":
        payload = {"maxLength": args.max_length, "keywords": args.keyword or []}
        if args.url:
            payload["url"] = args.url
        if args.text == "-":
            payload["text"] = sys.stdin.read()
        elif args.text:
            payload["text"] = args.text
        return "summarize", payload

    if args.command == "research":
        return "research", {
            "topic": args.topic,
            "questions": args.question or None,
            "skepticalMode": not args.no_skeptical,
        }

    return "deep-research", {
        "topic": args.topic,
        "questions": args.question or None,
        "depth": args.depth,
        "focusAreas": args.focus or [],
    }


async def run(entrypoint: str, payload: dict) -> dict:
    orchestrator = ResearchOrchestrator.from_settings(get_settings())
    return await orchestrator.handle(entrypoint, payload)


def main():
    parser = argparse.ArgumentParser(description="research-agent")
    subparsers = parser.add_subparsers(dest="command", required=True)

    summarize = subparsers.add_parser("summarize", help="Summarize a URL or text")
    summarize.add_argument("--url", "-u", help="Page to fetch and summarize")
    summarize.add_argument("--text", "-t", help="Text to summarize ('-' reads stdin)")
    summarize.add_argument("--max-length", "-n", type=int, default=500)
    summarize.add_argument("--keyword", "-k", action="append", help="Boost sentences containing this keyword")

    research = subparsers.add_parser("research", help="Research framework or AI analysis for a topic")
    research.add_argument("topic")
    research.add_argument("--question", "-q", action="append")
    research.add_argument("--no-skeptical", action="store_true", help="Skip skeptical analysis")

    deep = subparsers.add_parser("deep-research", help="Search, fetch and synthesize sources")
    deep.add_argument("topic")
    deep.add_argument("--question", "-q", action="append")
    deep.add_argument(
        "--depth",
        "-d",
        default="standard",
        choices=["quick", "standard", "thorough", "deep", "exhaustive"],
    )
    deep.add_argument("--focus", "-f", action="append", help="Focus area (repeatable)")

    serve = subparsers.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)

    args = parser.parse_args()
    if args.command == "serve":
        import uvicorn

        uvicorn.run("research_agent.main:app", host=args.host, port=args.port)
        return

    entrypoint, payload = build_payload(args)
    result = asyncio.run(run(entrypoint, payload))
    print(json.dumps(result, indent=2, default=str))
    if not result.get("success"):
        sys.exit(1)


if __name__ == "__main__":
    main()
