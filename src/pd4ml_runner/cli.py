"""Command-line interface for pd4ml-runner."""

import argparse
import logging
import sys
from pathlib import Path

from pd4ml_runner.document import Document, configure_fonts
from pd4ml_runner.exceptions import PD4MLError
from pd4ml_runner.options import BOOKMARK_ELEMENTS, PAGE_DIMENSIONS, PAGE_ORIENTATIONS
from schemas import ToolConfig


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for the CLI."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def parse_insets(value: str) -> tuple[int, int, int, int, str]:
    """Parse ``top,left,bottom,right,unit`` into its parts."""
    parts = [part.strip() for part in value.split(",")]
    if len(parts) != 5:
        raise argparse.ArgumentTypeError(
            f"insets must be top,left,bottom,right,unit: {value}"
        )
    try:
        top, left, bottom, right = (int(part) for part in parts[:4])
    except ValueError:
        raise argparse.ArgumentTypeError(f"inset values must be integers: {value}") from None
    return top, left, bottom, right, parts[4]


def load_config(args: argparse.Namespace) -> ToolConfig:
    """Environment configuration with command-line path overrides applied."""
    config = ToolConfig.from_env()
    overrides = {
        "java_path": args.java,
        "jar_path": args.jar,
        "font_path": args.fonts,
    }
    overrides = {key: value for key, value in overrides.items() if value is not None}
    if overrides:
        config = config.model_copy(update=overrides)
    return config


def build_options(args: argparse.Namespace) -> dict:
    """Collect rendering options from parsed arguments."""
    options = {
        "page_dimension": args.page_dimension,
        "page_orientation": args.orientation,
        "html_width": args.width,
        "bookmark_elements": args.bookmarks,
        "password": args.password,
    }
    if args.insets is not None:
        top, left, bottom, right, unit = args.insets
        options.update(
            inset_top=top,
            inset_left=left,
            inset_bottom=bottom,
            inset_right=right,
            inset_unit=unit,
        )
    for permission in ("annotate", "copy", "modify", "print"):
        if getattr(args, f"no_{permission}"):
            options[f"allow_{permission}"] = False
    if args.debug:
        options["debug"] = True
    return options


def render(args: argparse.Namespace) -> int:
    """Execute the render command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    output_path = args.output.resolve()
    output_path.parent.mkdir(parents=True, exist_ok=True)

    try:
        document = Document(load_config(args), options=build_options(args))
        for source in args.sources:
            document.add_page(source)

        result = document.save_to(output_path)

        if not result.success:
            logger.error("PD4ML did not report a page count")
            for number, message in sorted(result.errors.items()):
                logger.error(f"  - ERR{number}: {message}")
            return 1

        logger.info(f"Rendered PDF: {output_path}")
        logger.info(f"  Pages: {result.pages}")
        if result.bytes is not None:
            logger.info(f"  Bytes: {result.bytes}")
        return 0

    except PD4MLError as e:
        logger.error(f"Failed to render PDF: {e}")
        return 1


def configure_fonts_command(args: argparse.Namespace) -> int:
    """Execute the configure-fonts command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        config = load_config(args)
        output = configure_fonts(config)
    except PD4MLError as e:
        logger.error(f"Failed to configure fonts: {e}")
        return 1

    for line in output.splitlines():
        logger.debug(line)
    logger.info(f"Configured fonts in {config.font_path}")
    return 0


def add_tool_arguments(parser: argparse.ArgumentParser) -> None:
    """Tool path overrides shared by all commands."""
    parser.add_argument(
        "--java",
        type=str,
        default=None,
        help="Java runtime executable (default: $PD4ML_JAVA_PATH or java)",
    )
    parser.add_argument(
        "--jar",
        type=Path,
        default=None,
        help="Path to pd4ml.jar (default: $PD4ML_JAR_PATH or extras/pd4ml/pd4ml.jar)",
    )
    parser.add_argument(
        "--fonts",
        type=Path,
        default=None,
        help="Font directory (default: $PD4ML_FONT_PATH or extras/fonts)",
    )


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the CLI.

    Args:
        argv: Command-line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = argparse.ArgumentParser(
        prog="pd4ml",
        description="Render HTML to PDF with the PD4ML tool",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
    )

    render_parser = subparsers.add_parser(
        "render",
        help="Render HTML pages to a PDF file",
        description="Render URLs, HTML files or inline HTML to a single PDF using PD4ML.",
    )
    render_parser.add_argument(
        "sources",
        nargs="+",
        help="URLs, HTML file paths or inline HTML, in page order",
    )
    render_parser.add_argument(
        "--output",
        type=Path,
        required=True,
        help="Path of the PDF to write",
    )
    render_parser.add_argument(
        "--page-dimension",
        choices=PAGE_DIMENSIONS,
        default=None,
        help="Paper size (default: A4)",
    )
    render_parser.add_argument(
        "--orientation",
        choices=PAGE_ORIENTATIONS,
        default=None,
        help="Page orientation (default: PORTRAIT)",
    )
    render_parser.add_argument(
        "--width",
        type=int,
        default=None,
        help="HTML layout width in pixels (default: 800)",
    )
    render_parser.add_argument(
        "--insets",
        type=parse_insets,
        default=None,
        help="Page insets as top,left,bottom,right,unit (default: 10,20,10,10,mm)",
    )
    render_parser.add_argument(
        "--bookmarks",
        choices=BOOKMARK_ELEMENTS,
        default=None,
        help="Elements used to build PDF bookmarks (default: HEADINGS)",
    )
    render_parser.add_argument(
        "--password",
        type=str,
        default=None,
        help="User password for the PDF",
    )
    for permission in ("annotate", "copy", "modify", "print"):
        render_parser.add_argument(
            f"--no-{permission}",
            action="store_true",
            help=f"Deny the {permission} permission in the PDF",
        )
    render_parser.add_argument(
        "--debug",
        action="store_true",
        help="Ask PD4ML for debug output and log the full command",
    )
    add_tool_arguments(render_parser)
    render_parser.set_defaults(func=render)

    fonts_parser = subparsers.add_parser(
        "configure-fonts",
        help="Build the PD4ML font properties file",
        description="Scan the font directory and write the properties file PD4ML uses to resolve font names.",
    )
    add_tool_arguments(fonts_parser)
    fonts_parser.set_defaults(func=configure_fonts_command)

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
