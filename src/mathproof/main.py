"""
Command-line entrypoint for mathproof.

This script either:
- starts the interactive REPL when no file is given
- evaluates every expression of a file (or archive) and writes a results file
"""

import argparse
from pathlib import Path
import sys
from typing import List, Optional

from pydantic import BaseModel, Field, FilePath, ValidationError

from mathproof.batch.runner import BatchEvaluator
from mathproof.common.logger import configure_logging, logger
from mathproof.repl.repl import Repl


class CliArgs(BaseModel):
    """
    Pydantic model used to validate CLI arguments.

    Attributes
    ----------
    file_path : Optional[FilePath]
        File or archive of expressions to evaluate, None for the REPL.
    output : Optional[Path]
        Results file, derived from file_path when omitted.
    verbose : bool
        Enable debug logging.
    prompt : str
        REPL prompt.
    """

    file_path: Optional[FilePath] = None
    output: Optional[Path] = None
    verbose: bool = False
    prompt: str = Field(default="mathproof> ", min_length=1)


def parse_args(argv: Optional[List[str]] = None) -> CliArgs:
    """
    Parse and validate command-line arguments.

    :param argv: Arguments to parse, defaults to sys.argv[1:]
    :return: Validated CLI arguments
    :rtype: CliArgs
    """
    parser = argparse.ArgumentParser(
        prog="mathproof",
        description="Mathematical Proof System",
    )

    parser.add_argument(
        "file_path",
        nargs="?",
        help="File or archive (.zip, .tar.xz, .7z) of expressions to evaluate; starts the REPL when omitted",
    )
    parser.add_argument("-o", "--output", help="Path of the results file")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--prompt", default="mathproof> ", help="REPL prompt")

    args = parser.parse_args(argv)

    try:
        return CliArgs(
            file_path=args.file_path,
            output=args.output,
            verbose=args.verbose,
            prompt=args.prompt,
        )
    except ValidationError as exc:
        parser.error(str(exc))


def build_output_path(input_path: Path) -> Path:
    """
    Name the results file after the input file, in the same directory.

    Every suffix is kept with its dot turned into an underscore, so inputs that
    differ only by format (``ops.txt``, ``ops.7z``, ``ops.tar.xz``) get distinct
    results files: ``ops_txt_results.txt``, ``ops_7z_results.txt`` and
    ``ops_tar_xz_results.txt``.

    :param Path input_path: Expression file or archive

    :return: Path of the results file
    :rtype: Path
    """
    suffixes = "".join(input_path.suffixes)
    base = input_path.name[: -len(suffixes)] if suffixes else input_path.name
    return input_path.with_name(f"{base}{suffixes.replace('.', '_')}_results.txt")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function of the mathproof console script.

    :return: Process exit status
    :rtype: int
    """
    cli_args = parse_args(argv)
    configure_logging("DEBUG" if cli_args.verbose else None)

    if cli_args.file_path is None:
        try:
            Repl(prompt=cli_args.prompt).run()
        except KeyboardInterrupt:
            sys.stdout.write("\n")
        return 0

    input_path: Path = Path(cli_args.file_path)
    output_path: Path = cli_args.output or build_output_path(input_path)

    try:
        results = BatchEvaluator(input_file=input_path, output_file=output_path).run()
    except (OSError, ValueError) as exc:
        logger.error(f"📄❌ Could not evaluate {input_path}: {exc}")
        return 1

    failed = sum(1 for result in results if not result.ok)
    print(f"{len(results) - failed}/{len(results)} expressions evaluated, results in {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
