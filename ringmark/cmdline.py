"""Command-line options of the marker detection program."""

from __future__ import annotations

import argparse
from dataclasses import dataclass


@dataclass
class DetectionOptions:
    """Options given to the detection program."""

    input: str
    n_rings: int
    bank: str = ""
    params: str = ""
    output: str = ""


def _non_negative_int(text: str) -> int:
    try:
        value = int(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid count: {text!r}") from exc
    if value < 0:
        raise argparse.ArgumentTypeError(f"count must not be negative: {text!r}")
    return value


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Program for detecting CCTags in images or in a video"
    )
    required = parser.add_argument_group("Required input parameters")
    required.add_argument(
        "-i",
        "--input",
        required=True,
        help="Path to an image (JPG, PNG) or video (avi, mov) or camera index "
        "for live capture (0, 1...)",
    )
    required.add_argument(
        "-n",
        "--nbrings",
        dest="n_rings",
        type=_non_negative_int,
        required=True,
        help="Number of rings of the CCTags to detect",
    )
    optional = parser.add_argument_group("Optional parameters")
    optional.add_argument(
        "-b", "--bank", default="", help="Path to a bank parameter file, e.g. 4Crowns/ids.txt"
    )
    optional.add_argument("-p", "--params", default="", help="Path to configuration XML file")
    optional.add_argument("-o", "--output", default="", help="Output folder name")
    return parser


def parse_args(argv=None) -> DetectionOptions:
    """Parse the command line; exits with a usage message when it is invalid."""
    ns = _parser().parse_args(argv)
    return DetectionOptions(
        input=ns.input,
        n_rings=ns.n_rings,
        bank=ns.bank,
        params=ns.params,
        output=ns.output,
    )


def format_summary(options: DetectionOptions, prog: str) -> str:
    """Return the report of the options the program was called with."""
    return (
        f"You called {prog} with:\n"
        f"    --input     {options.input}\n"
        f"    --nbrings     {options.n_rings}\n"
        f"    --bank      {options.bank}\n"
        f"    --params    {options.params}\n"
        f"    --output    {options.output}\n"
        "\n"
    )