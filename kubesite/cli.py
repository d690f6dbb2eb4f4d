"""Command line entry point: ``kubesite build | audit | serve``."""

import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional

from kubesite import config


def _build(args: argparse.Namespace) -> int:
    from kubesite.services.prerender import prerender_site

    report = prerender_site(args.content_dir, args.output_dir)
    for page in report.pages:
        print(f"Pre-rendered: /{page.category}/{page.slug}")
    for category in report.skipped_categories:
        print(f"Skipped missing category: {category}")
    for path in report.failed_files:
        print(f"Failed: {path}", file=sys.stderr)
    print(f"Pre-rendering complete: {len(report.pages)} page(s) in {args.output_dir}")
    return 1 if report.failed_files else 0


def _audit(args: argparse.Namespace) -> int:
    from kubesite.services.audit import audit_site

    report = audit_site(args.output_dir, fix=args.fix)
    for entry in report.entries:
        if entry.status == "ok":
            continue
        line = f"{entry.path}: {entry.status}"
        if entry.url:
            line += f" ({entry.url} -> {entry.expected})"
        if entry.fixed:
            line += " [fixed]"
        print(line)
    for loc in report.sitemap_issues:
        print(f"sitemap.xml: non-canonical loc {loc}")

    print(f"Checked {len(report.entries)} page(s), {len(report.issues)} issue(s) remaining")
    return 0 if report.ok else 1


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    # Article pages are fetched back from this server unless an origin is configured
    if "KUBESITE_CONTENT_ORIGIN" not in os.environ:
        host = "127.0.0.1" if args.host in ("0.0.0.0", "::") else args.host
        origin = f"http://{host}:{args.port}"
        os.environ["KUBESITE_CONTENT_ORIGIN"] = origin  # reload workers re-import config
        config.CONTENT_ORIGIN = origin

    uvicorn.run("kubesite.main:app", host=args.host, port=args.port, reload=args.reload)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="kubesite", description=__doc__)
    sub = parser.add_subparsers(dest="command", required=True)

    build = sub.add_parser("build", help="Pre-render every markdown article to static HTML")
    build.add_argument("--content-dir", type=Path, default=config.CONTENT_ROOT)
    build.add_argument("--output-dir", type=Path, default=config.OUTPUT_ROOT)
    build.set_defaults(func=_build)

    audit = sub.add_parser("audit", help="Check canonical URLs in the build output")
    audit.add_argument("--output-dir", type=Path, default=config.OUTPUT_ROOT)
    audit.add_argument("--fix", action="store_true", help="Rewrite non-canonical URLs in place")
    audit.set_defaults(func=_audit)

    serve = sub.add_parser(
        "serve",
        help="Run the content server",
        description=(
            "Runs the FastAPI app with uvicorn. Article pages fetch their content from "
            "KUBESITE_CONTENT_ORIGIN, which defaults to this server's own host and port."
        ),
    )
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.add_argument("--reload", action="store_true")
    serve.set_defaults(func=_serve)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    config.configure_logging()
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
