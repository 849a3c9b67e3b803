"""Command-line interface for the narration subtitle generator.

WHY: The chapter pipeline and operators need a simple way to turn a
narration job (text + TTS timestamps, as JSON) into an ASS subtitle file
from the terminal or a shell step, without writing Python.

HOW: Uses argparse to accept a job file path ("-" for stdin), an output
directory, a max cue length and an optional title. The JSON is validated
with the pydantic NarrationJob model, then handed to
pipeline.generate_subtitles(). Status messages go to stderr; the subtitle
is saved next to the job file (or to --output-dir), or printed with
--stdout.

RULES:
- Positional argument: job JSON file path, or "-" for stdin
- Output naming: {narration_id}_subtitle.ass, numeric suffix for
  conflicts (_subtitle-2.ass) — never overwrites
- Status output goes to stderr (not stdout)
- Exit codes: 0 = success, 1 = invalid input or generation error
- --verbose switches logging to DEBUG
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, NoReturn, Optional

from pydantic import ValidationError

from novel_subtitles.models import NarrationJob
from novel_subtitles.pipeline import SubtitleOutput, generate_subtitles


def _status(msg: str) -> None:
    """Print a status message to stderr.

    WHY: Status output must not pollute stdout so --stdout can be piped.
    """
    print(msg, file=sys.stderr, flush=True)


def _fail(msg: str) -> NoReturn:
    print("Error: {}".format(msg), file=sys.stderr)
    sys.exit(1)


def _resolve_output_path(file_name: str, output_dir: Path) -> Path:
    """Resolve the output file path, adding a numeric suffix on conflict.

    WHY: Subtitles are regenerated whenever narration audio changes.
    Overwriting a previous version would lose it; numeric suffixes keep
    every version side by side.

    HOW: Check if {file_name} exists. If so, insert an increasing counter
    before the extension until a free name is found.

    RULES:
    - First attempt: n1_subtitle.ass
    - Conflict: n1_subtitle-2.ass, n1_subtitle-3.ass, ...

    Args:
        file_name: Suggested file name from SubtitleOutput.
        output_dir: Directory to save the file in.

    Returns:
        A Path that does not yet exist.
    """
    base_path = output_dir / file_name
    if not base_path.exists():
        return base_path

    dot_idx = file_name.rfind(".")
    if dot_idx > 0:
        name, ext = file_name[:dot_idx], file_name[dot_idx:]
    else:
        name, ext = file_name, ""

    counter = 2
    while True:
        candidate = output_dir / "{}-{}{}".format(name, counter, ext)
        if not candidate.exists():
            return candidate
        counter += 1


def _save_output(output: SubtitleOutput, output_dir: Path) -> Path:
    path = _resolve_output_path(output.file_name, output_dir)
    path.write_text(output.content, encoding="utf-8")
    return path


def _load_job(job_file: str) -> NarrationJob:
    """Read and validate a narration job.

    Files are read as bytes so that pydantic's JSON parser reports bad
    encodings along with every other malformed input.

    Raises:
        OSError: If the file cannot be read.
        ValidationError: If the JSON is malformed, not UTF-8, or fails
            validation.
        UnicodeDecodeError: If stdin cannot be decoded.
    """
    if job_file == "-":
        raw = sys.stdin.read()
    else:
        raw = Path(job_file).read_bytes()
    return NarrationJob.model_validate_json(raw)


def run(args: argparse.Namespace) -> None:
    """Execute the subtitle pipeline for parsed arguments.

    RULES:
    - Validate output directory before doing any work
    - Any ValueError (including pydantic ValidationError) exits with 1
    """
    if args.job_file != "-":
        job_path = Path(args.job_file).resolve()
        if not job_path.is_file():
            _fail("File not found: {}".format(job_path))
        default_dir = job_path.parent
    else:
        default_dir = Path.cwd()

    output_dir = Path(args.output_dir).resolve() if args.output_dir else default_dir
    if not args.stdout and not output_dir.is_dir():
        _fail("Output directory does not exist: {}".format(output_dir))

    _status("Loading narration job...")
    try:
        job = _load_job(args.job_file)
    except (ValidationError, UnicodeDecodeError) as e:
        _fail("Invalid narration job: {}".format(e))
    except OSError as e:
        _fail(str(e))

    _status("  Narration {}: {} clip(s)".format(job.narration_id, len(job.clips)))

    _status("Generating subtitles...")
    try:
        output = generate_subtitles(job, max_length=args.max_length, title=args.title)
    except ValueError as e:
        _fail(str(e))

    _status("  {}".format(output.parameters))

    if args.stdout:
        sys.stdout.write(output.content)
        sys.stdout.write("\n")
        return

    saved = _save_output(output, output_dir)
    _status("")
    _status("Done! Saved {}".format(saved))


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError("expected an integer, got {!r}".format(value))
    if number <= 0:
        raise argparse.ArgumentTypeError("must be positive, got {}".format(number))
    return number


def build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the CLI.

    WHY: Separating parser construction from main() makes the CLI
    testable — tests can inspect the parser without running the pipeline.

    RULES:
    - Positional: job_file (required)
    - Optional: --output-dir, --max-length, --title, --stdout, --verbose
    """
    parser = argparse.ArgumentParser(
        prog="novel_subtitles",
        description="Generate an ASS subtitle file from narration text and "
                    "per-character TTS timestamps.",
    )

    parser.add_argument(
        "job_file",
        help="Path to the narration job JSON file, or '-' to read from stdin.",
    )

    parser.add_argument(
        "--output-dir",
        default=None,
        help="Directory to save the subtitle file (default: next to the job file).",
    )

    parser.add_argument(
        "--max-length",
        type=_positive_int,
        default=None,
        help="Maximum characters per cue, punctuation excluded "
             "(default: SUBTITLE_MAX_LENGTH or 12).",
    )

    parser.add_argument(
        "--title",
        default=None,
        help="Script title (default: derived from the chapter title).",
    )

    parser.add_argument(
        "--stdout",
        action="store_true",
        help="Print the subtitle file to stdout instead of saving it.",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the CLI.

    RULES:
    - argv=None means use sys.argv (normal CLI invocation)
    - Explicit argv is for testing
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    run(args)


if __name__ == "__main__":
    main()
