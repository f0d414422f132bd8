#!/usr/bin/env python3
"""
logo-studio command line.

  logo-studio run --transcript meeting.json --out-dir ./logos
  logo-studio run --transcript meeting.txt --persist
  cat meeting.txt | logo-studio run
  logo-studio serve --port 8000

``run`` analyses a transcript and generates the three logo concepts. Without
``--out-dir`` the result is printed as JSON; with it, each concept is written
as ``<logo_type>.svg`` next to a ``meta.json``. ``--persist`` also stores the
project (requires the Supabase env vars).
"""

import argparse
import asyncio
import json
import os
import sys
from typing import Any, Dict, List

from .config import configure_logging, create_openai_client, create_supabase_client
from .schemas import BrandAnalysis, GeneratedLogo, TranscriptEntry
from .services.logo_generator import LogoGenerator
from .services.projects import ProjectPipeline
from .services.store import SupabaseStore
from .transcripts import parse_transcript_text


def _read_transcript(path: str | None) -> str:
    if path:
        with open(path, "r", encoding="utf-8") as f:
            return f.read()
    return sys.stdin.read()


async def run_pipeline(
    transcript: List[TranscriptEntry],
    persist: bool = False,
) -> Dict[str, Any]:
    generator = LogoGenerator.from_openai(create_openai_client())

    if persist:
        pipeline = ProjectPipeline(SupabaseStore(create_supabase_client()), generator)
        project, brand_analysis, logos = await pipeline.analyze(transcript)
        return _result(brand_analysis, logos, project_id=project.id)

    brand_analysis = await generator.analyze(transcript)
    logos = await generator.generate_all(brand_analysis)
    return _result(brand_analysis, logos)


def _result(brand_analysis: BrandAnalysis, logos: List[GeneratedLogo], project_id: str | None = None) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "brandAnalysis": brand_analysis.model_dump(by_alias=True, mode="json"),
        "logos": [logo.model_dump(by_alias=True, mode="json") for logo in logos],
    }
    if project_id:
        out["projectId"] = project_id
    return out


def save_svgs(result: Dict[str, Any], out_dir: str) -> str:
    """
    Save each concept's SVG as <logo_type>.svg under out_dir, plus meta.json
    holding the brand analysis and rationales. Returns the meta.json path.
    """
    os.makedirs(out_dir, exist_ok=True)
    meta: Dict[str, Any] = {k: v for k, v in result.items() if k != "logos"}
    meta["concepts"] = []

    for logo in result["logos"]:
        path = os.path.join(out_dir, f"{logo['logoType']}.svg")
        with open(path, "w", encoding="utf-8") as f:
            f.write(logo["svgCode"])
        meta["concepts"].append(
            {
                "conceptName": logo["conceptName"],
                "logoType": logo["logoType"],
                "rationale": logo["rationale"],
                "file": path,
            }
        )

    meta_path = os.path.join(out_dir, "meta.json")
    with open(meta_path, "w", encoding="utf-8") as f:
        json.dump(meta, f, ensure_ascii=False, indent=2)
    return meta_path


def _cmd_run(args: argparse.Namespace) -> None:
    try:
        transcript = parse_transcript_text(_read_transcript(args.transcript))
    except ValueError as exc:
        raise SystemExit(str(exc))

    result = asyncio.run(run_pipeline(transcript, persist=args.persist))

    if args.out_dir:
        meta_path = save_svgs(result, args.out_dir)
        print(f"Wrote {len(result['logos'])} SVGs + metadata to: {meta_path}")
    else:
        print(json.dumps(result, ensure_ascii=False))


def _cmd_serve(args: argparse.Namespace) -> None:
    import uvicorn

    uvicorn.run("logo_studio.main:app", host=args.host, port=args.port, reload=args.reload)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="logo-studio")
    parser.add_argument("--log-level", type=str, default=None, help="Override LOGO_LOG_LEVEL")
    sub = parser.add_subparsers(dest="command", required=True)

    run = sub.add_parser("run", help="Generate logo concepts from a transcript")
    run.add_argument("--transcript", type=str, help="Path to transcript JSON or text file (or read from stdin)")
    run.add_argument("--out-dir", type=str, help="Directory to save the SVGs and meta.json")
    run.add_argument("--persist", action="store_true", help="Store the project in Supabase")
    run.set_defaults(func=_cmd_run)

    serve = sub.add_parser("serve", help="Run the API and browser UI")
    serve.add_argument("--host", type=str, default="0.0.0.0")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--reload", action="store_true")
    serve.set_defaults(func=_cmd_serve)

    return parser


def cli_main(argv: List[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level.upper() if args.log_level else None)
    args.func(args)


if __name__ == "__main__":
    cli_main()
