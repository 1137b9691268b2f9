"""
Command-line entrypoint.

Without a file argument, starts the interactive shell on stdin/stdout.
With a file argument (.txt, .zip, .tar.xz or .7z), evaluates every line of it
in worker processes and writes the results next to the input file.
"""
import argparse
from pathlib import Path
from typing import List, Optional

from pydantic import BaseModel, Field, FilePath, ValidationError

from postfix_calculator.batch.loader import ExpressionLoader
from postfix_calculator.batch.runner import BatchRunner
from postfix_calculator.common.logger import logger, set_verbose
from postfix_calculator.common.settings import CalculatorSettings
from postfix_calculator.shell.repl import InteractiveShell


class CliArgs(BaseModel):
    """
    Pydantic model used to validate CLI arguments.

    Attributes
    ----------
    file_path : Optional[FilePath]
        File containing one expression per line; None for the interactive shell.
    lenient : bool
        Let pify/frac/prime/factor end the evaluation wherever they appear.
    max_workers : Optional[int]
        Number of batch worker processes.
    verbose : bool
        Log at DEBUG level.
    """

    file_path: Optional[FilePath] = None
    lenient: bool = False
    max_workers: Optional[int] = Field(default=None, ge=1)
    verbose: bool = False

    def settings(self) -> CalculatorSettings:
        return CalculatorSettings(strict_terminal=not self.lenient, max_workers=self.max_workers)


def parse_args(argv: Optional[List[str]] = None) -> CliArgs:
    """
    Parse and validate command-line arguments.

    :param list argv: Arguments, sys.argv[1:] when omitted

    :return: Validated CLI arguments
    :rtype: CliArgs
    """
    parser = argparse.ArgumentParser(
        description="Infix to postfix converter and evaluator"
    )

    parser.add_argument(
        "file_path",
        nargs="?",
        help="File with one expression per line (.txt, .zip, .tar.xz, .7z); omit for the interactive shell",
    )
    parser.add_argument(
        "--lenient",
        action="store_true",
        help="Let pify/frac/prime/factor end the evaluation even when they are not the last operation",
    )
    parser.add_argument("--max-workers", type=int, help="Number of batch worker processes")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log conversion details")

    args = parser.parse_args(argv)

    try:
        return CliArgs(
            file_path=args.file_path,
            lenient=args.lenient,
            max_workers=args.max_workers,
            verbose=args.verbose,
        )
    except ValidationError as exc:
        parser.error(str(exc))


def build_output_path(input_path: Path) -> Path:
    """
    Construct the results file path based on the input file.

    - Preserves the original folder
    - Replaces dots in extensions with underscores
    - Appends '_results.txt' at the end

    Examples
    --------
    input: resources/expressions.7z
    output: resources/expressions_7z_results.txt

    :param input_path: Path to the input file
    :return: Path to the output file
    """
    suffix_safe = "_".join(input_path.suffixes).replace(".", "_")
    stem = input_path.name[: len(input_path.name) - len("".join(input_path.suffixes))]
    return input_path.with_name(f"{stem}{suffix_safe}_results.txt")


def main(argv: Optional[List[str]] = None) -> int:
    """
    Run the shell or the batch evaluation.

    :param list argv: Arguments, sys.argv[1:] when omitted

    :return: Process exit code
    :rtype: int
    """
    cli_args = parse_args(argv)
    set_verbose(cli_args.verbose)
    settings = cli_args.settings()

    if cli_args.file_path is None:
        InteractiveShell(settings=settings).run()
        return 0

    input_path = Path(cli_args.file_path)
    try:
        expressions = ExpressionLoader(input_file=input_path).load()
    except ValueError as exc:
        logger.error(f"📄❌ Cannot read {input_path}: {exc}")
        return 1

    output_path = build_output_path(input_path)
    results = BatchRunner(output_file=output_path, settings=settings).run(expressions)
    failed = sum(1 for result in results if not result.ok)
    logger.info(f"✅ {len(results) - failed} succeeded, ❌ {failed} failed")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
