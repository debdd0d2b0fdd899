import argparse
import asyncio
import os
import sys
import logging
from pathlib import Path
from dotenv import load_dotenv

from repodoc.application.analysis_service import AnalysisService
from repodoc.application.session import AnalysisSession
from repodoc.infrastructure.github_client import DEFAULT_API_URL, GitHubRestClient

logger = logging.getLogger(__name__)

def configure_logging(level_name: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level_name.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[
            logging.StreamHandler(sys.stderr)
        ]
    )

def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="repodoc",
        description="Generate Markdown documentation for a public GitHub repository.",
    )
    parser.add_argument("url", help="Repository URL, e.g. https://github.com/owner/name")
    parser.add_argument("--output", type=Path, help="Write the Markdown document here instead of stdout")
    return parser.parse_args(argv)

async def main(argv=None) -> int:
    # Load environment variables from .env file
    load_dotenv()
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))
    args = parse_args(argv)

    github_client = GitHubRestClient(api_url=os.getenv("GITHUB_API_URL", DEFAULT_API_URL))
    service = AnalysisService(github_client=github_client)
    session = AnalysisSession()

    report = await session.run(service, args.url)
    if report is None:
        logger.error(f"Analysis failed: {session.error}")
        return 1

    document = report.bundle.to_markdown()
    if args.output:
        args.output.write_text(document, encoding="utf-8")
        logger.info(f"Documentation written to {args.output}.")
    else:
        print(document)
    return 0

def run() -> None:
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        logger.info("Analysis interrupted by user. Exiting.")
        sys.exit(130)
    except Exception as e:
        logger.exception(f"An unexpected error occurred: {e}")
        sys.exit(1)

if __name__ == "__main__":
    run()
