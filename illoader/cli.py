import argparse
import sys
import time

from .config import SEARCH_PATH_ENV_VAR, LoaderConfig
from .core.loader import SKIPPED, Loader, LoaderState
from .exceptions import ILError, ModuleLoadError
from .script.interpreter import ScriptHost, format_value
from .utils import TerminalColors, configure_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Load and run IL scripts.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Print loader diagnostics to stderr.")

    subparsers = parser.add_subparsers(dest="command", required=True)

    include_help = f"Add a directory to the search path, ahead of ${SEARCH_PATH_ENV_VAR}. May be repeated."

    run_parser = subparsers.add_parser("run", help="Run an IL script and print its result.")
    run_parser.add_argument("script", help="The script to run, resolved like any other module name.")
    run_parser.add_argument("-I", "--include", dest="include", action="append", default=[], help=include_help)
    run_parser.add_argument(
        "--repeat",
        type=int,
        default=1,
        help="Load the script this many times. Unchanged scripts are skipped after the first run.",
    )

    resolve_parser = subparsers.add_parser("resolve", help="Print the file a module name resolves to.")
    resolve_parser.add_argument("name", help="The module name to resolve.")
    resolve_parser.add_argument("-I", "--include", dest="include", action="append", default=[], help=include_help)

    return parser


def make_loader(include) -> Loader:
    config = LoaderConfig.from_env()
    config = config.model_copy(update={"search_path": list(include) + config.search_path})
    return Loader(ScriptHost(), LoaderState(config))


def main(argv=None):
    start_time = time.perf_counter()

    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if args.command == "run" and args.repeat < 1:
        parser.error("--repeat must be at least 1.")

    loader = make_loader(args.include)

    try:
        if args.command == "resolve":
            print(loader.resolve(args.name))
            return

        print(f"--- Running {args.script} ---")
        for _ in range(args.repeat):
            result = loader.require(args.script)
            if result is SKIPPED:
                print(f"{TerminalColors.YELLOW}--- Skipped: content unchanged ---{TerminalColors.RESET}")
            else:
                print(f"\n{TerminalColors.GREEN}--- Result: {format_value(result)} ---{TerminalColors.RESET}")

    # --- Error Handling ---
    except ModuleLoadError as e:
        print(f"\n{TerminalColors.RED}--- LOAD ERROR ---\n{e}{TerminalColors.RESET}", file=sys.stderr)
        sys.exit(1)
    except ILError as e:
        print(f"{TerminalColors.RED}ERROR: {e}{TerminalColors.RESET}", file=sys.stderr)
        sys.exit(1)

    finally:
        if args.command == "run":
            duration = time.perf_counter() - start_time
            print(f"\n{TerminalColors.CYAN}--- Total Execution Time: {duration:.4f} seconds ---{TerminalColors.RESET}")


if __name__ == "__main__":
    main()
