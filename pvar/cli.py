"""
p-variation Command Line Interface

Usage:
    python -m pvar <command> [args]

Commands:
    compute     p-variation of every signal in an observations file
    value       p-variation of numbers given on the command line or stdin
    config      Show the effective configuration

Examples:
    python -m pvar compute -i observations.parquet -o pvar.parquet -p 2
    python -m pvar value -p 2 0 1 0
    echo "0 1 0 1 0" | python -m pvar value -p 1
    python -m pvar config

SafeCLI:
    Standardized argument parsing for entry points with safety checks:
    1. Named arguments (no positional ambiguity)
    2. Input file validation (must exist)
    3. Output file protection (can't overwrite inputs)
    4. Overwrite confirmation for non-default outputs

    Usage in entry points:
        from pvar.cli import SafeCLI

        cli = SafeCLI("p-variation Compute")
        cli.add_input('input', '-i', help='observations.parquet')
        cli.add_output('output', default='pvar.parquet')
        args = cli.parse()
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional, Set


# ============================================================
# SAFE CLI FOR ENTRY POINTS
# ============================================================

class SafeCLI:
    """
    Safe command-line interface with input/output validation.

    Prevents accidental data destruction by:
    - Validating input files exist
    - Preventing output from overwriting inputs
    - Confirming overwrites of existing files
    """

    def __init__(self, description: str, allow_overwrite: bool = False, prog: Optional[str] = None):
        """
        Initialize CLI parser.

        Args:
            description: Program description for --help
            allow_overwrite: If True, skip overwrite confirmation (for scripts)
            prog: Program name shown in usage
        """
        self.parser = argparse.ArgumentParser(
            prog=prog,
            description=description,
            formatter_class=argparse.RawDescriptionHelpFormatter
        )
        self.inputs: List[str] = []
        self.outputs: List[str] = []
        self.defaults: dict = {}
        self.allow_overwrite = allow_overwrite

        self.parser.add_argument(
            '-y', '--yes',
            action='store_true',
            help='Skip confirmation prompts (for automated scripts)'
        )
        self.parser.add_argument(
            '-v', '--verbose',
            action='store_true',
            help='Verbose output'
        )
        self.parser.add_argument(
            '-q', '--quiet',
            action='store_true',
            help='Suppress output'
        )

    def add_input(
        self,
        name: str,
        flag: Optional[str] = None,
        help: str = '',
        required: bool = True
    ):
        """
        Add an input file argument.

        Args:
            name: Argument name (e.g., 'input')
            flag: Optional short flag (e.g., '-i')
            help: Help text
            required: Whether argument is required
        """
        self.inputs.append(name)

        flag_name = f"--{name.replace('_', '-')}"
        flags = [flag, flag_name] if flag else [flag_name]

        self.parser.add_argument(
            *flags,
            dest=name,
            required=required,
            metavar='FILE',
            help=f'[INPUT] {help}'
        )

    def add_output(
        self,
        name: str = 'output',
        default: str = 'output.parquet',
        help: str = ''
    ):
        """
        Add an output file argument.

        Args:
            name: Argument name
            default: Default output filename
            help: Help text (auto-generated if empty)
        """
        self.outputs.append(name)
        self.defaults[name] = default

        if not help:
            help = f'Output path (default: {default})'

        flags = ['-o', '--output'] if name == 'output' else [f"--{name.replace('_', '-')}"]
        self.parser.add_argument(
            *flags,
            dest=name,
            default=default,
            metavar='FILE',
            help=f'[OUTPUT] {help}'
        )

    def add_flag(self, name: str, help: str = '', short: Optional[str] = None):
        """Add a boolean flag."""
        flags = [f'--{name.replace("_", "-")}']
        if short:
            flags.insert(0, short)
        self.parser.add_argument(*flags, dest=name, action='store_true', help=help)

    def add_option(
        self,
        name: str,
        default=None,
        type=str,
        help: str = '',
        choices: Optional[List] = None,
        short: Optional[str] = None,
        repeat: bool = False,
    ):
        """Add an option with a value. repeat=True collects a list."""
        flags = [f'--{name.replace("_", "-")}']
        if short:
            flags.insert(0, short)
        self.parser.add_argument(
            *flags,
            dest=name,
            default=default,
            type=type,
            choices=choices,
            action='append' if repeat else 'store',
            help=help
        )

    def parse(self, args: Optional[List[str]] = None) -> argparse.Namespace:
        """
        Parse arguments with safety validation.

        Args:
            args: Arguments to parse (default: sys.argv)

        Returns:
            Parsed arguments namespace

        Raises:
            SystemExit: On validation failure
        """
        parsed = self.parser.parse_args(args)

        if parsed.quiet:
            parsed.verbose = False

        input_paths: Set[str] = set()
        for input_name in self.inputs:
            path = getattr(parsed, input_name, None)
            if path:
                input_paths.add(str(Path(path).resolve()))
                if not Path(path).exists():
                    self.error(f"Input file not found: {path}")

        for output_name in self.outputs:
            path = getattr(parsed, output_name, None)
            if path:
                abs_path = str(Path(path).resolve())

                if abs_path in input_paths:
                    self.error(
                        f"Output '{path}' matches an input file!\n"
                        f"       This would destroy your input data.\n"
                        f"       Use -o/--output to specify a different output path."
                    )

                default = self.defaults.get(output_name)
                if (
                    Path(path).exists()
                    and path != default
                    and not self.allow_overwrite
                    and not parsed.yes
                ):
                    self._confirm_overwrite(path)

        return parsed

    def error(self, message: str):
        """Print error and exit."""
        print(f"\nERROR: {message}", file=sys.stderr)
        sys.exit(1)

    def _confirm_overwrite(self, path: str):
        """Ask user to confirm overwrite."""
        print(f"\nWARNING: Output file '{path}' already exists.")
        try:
            response = input("   Overwrite? [y/N]: ")
            if response.lower() != 'y':
                print("   Aborted.")
                sys.exit(0)
        except EOFError:
            self.error(
                f"Output file '{path}' exists and running non-interactively.\n"
                f"       Use -y/--yes to overwrite, or choose a different output path."
            )


# ============================================================
# MAIN CLI
# ============================================================


def _parse_numbers(tokens: List[str]) -> List[float]:
    """Parse whitespace/comma separated numbers."""
    values = []
    for token in tokens:
        for part in token.replace(',', ' ').split():
            values.append(float(part))
    return values


def cmd_compute(args):
    """Compute p-variation for an observations file."""
    from pvar.entry_points.compute import main as compute_main

    try:
        return compute_main(args.rest)
    except (FileNotFoundError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1


def cmd_value(args):
    """Print the p-variation of numbers from argv or stdin."""
    from pvar.config import load_pvar_config
    from pvar.engines.python import p_variation

    try:
        tokens = args.values if args.values else sys.stdin.read().split()
        values = _parse_numbers(tokens)
        config = load_pvar_config(args.config) if args.config else load_pvar_config()
    except (FileNotFoundError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    p = args.p if args.p is not None else config.p_values[0]
    if not p > 0:
        print(f"ERROR: p must be > 0, got {p}", file=sys.stderr)
        return 1

    params = config.engine_params(p)
    if args.method:
        params['method'] = args.method

    result = p_variation.compute(values, params)
    if args.norm:
        print(repr(result['p_variation_norm']))
    else:
        print(repr(result['p_variation']))
    return 0


def cmd_config(args):
    """Show the effective configuration."""
    from pvar.config import dump_config, load_pvar_config

    try:
        config = load_pvar_config(args.config) if args.config else load_pvar_config()
    except (FileNotFoundError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    source = config.source or 'defaults'
    print(f"# source: {source}")
    print(dump_config(config), end='')
    return 0


def main(argv: Optional[List[str]] = None):
    """p-variation CLI entry point."""
    parser = argparse.ArgumentParser(
        prog='pvar',
        description='p-variation of real-valued paths',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m pvar compute -i observations.parquet -o pvar.parquet
    python -m pvar value -p 2 0 1 0
    python -m pvar config
        """,
    )

    subparsers = parser.add_subparsers(dest='command', help='Command to run')

    # compute command
    # arguments are forwarded to the compute entry point (see compute --help)
    subparsers.add_parser(
        'compute',
        help='p-variation of every signal in an observations file',
        add_help=False,
    )

    # value command
    value_parser = subparsers.add_parser(
        'value',
        help='p-variation of numbers given on the command line or stdin',
    )
    value_parser.add_argument(
        'values',
        nargs='*',
        help='Path values (read from stdin if omitted)',
    )
    value_parser.add_argument(
        '--p', '-p',
        type=float,
        help='Exponent (default: first of config p_values)',
    )
    value_parser.add_argument(
        '--method', '-m',
        choices=['chain', 'reference'],
        help='Algorithm (default: from config)',
    )
    value_parser.add_argument(
        '--norm',
        action='store_true',
        help='Print the 1/p-rooted norm instead of the sum of powers',
    )
    value_parser.add_argument(
        '--config', '-c',
        help='Config YAML',
    )

    # config command
    config_parser = subparsers.add_parser(
        'config',
        help='Show the effective configuration',
    )
    config_parser.add_argument(
        '--config', '-c',
        help='Config YAML',
    )

    args, rest = parser.parse_known_args(argv)
    if rest and args.command != 'compute':
        parser.error(f"unrecognized arguments: {' '.join(rest)}")
    args.rest = rest

    if args.command is None:
        parser.print_help()
        return 0

    handlers = {
        'compute': cmd_compute,
        'value': cmd_value,
        'config': cmd_config,
    }

    handler = handlers.get(args.command)
    if handler:
        return handler(args)
    else:
        parser.print_help()
        return 1


if __name__ == '__main__':
    sys.exit(main())
