from __future__ import annotations

"""
CLI Argument Definition and Mapping.

Defines the command-line schema and translates parsed namespaces into
configuration overrides understood by the validator.
"""

import argparse
from typing import Any, Dict, List, Optional

# -----------------------------------------------------------------------------
# ARGUMENT DEFINITION
# -----------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """
    Construct the argument parser for the plantocode CLI.

    Returns:
        argparse.ArgumentParser: Configured parser instance.
    """
    p = argparse.ArgumentParser(
        prog="plantocode",
        description="Directory trees, token estimates and Gemini requests for AI coding prompts.",
    )
    p.add_argument(
        "--debug",
        action="store_true",
        help="Elevate logging verbosity to DEBUG.",
    )
    p.add_argument(
        "--json",
        dest="json_output",
        action="store_true",
        help="Print machine-readable JSON instead of text.",
    )
    p.add_argument(
        "--use-defaults",
        action="store_true",
        help="Ignore the stored configuration file.",
    )

    sub = p.add_subparsers(dest="command", metavar="COMMAND")
    sub.required = True

    # --- Directory tree ---
    tree = sub.add_parser("tree", help="Print the directory tree of one or more projects.")
    tree.add_argument(
        "-i", "--input",
        dest="input_paths",
        action="append",
        required=True,
        help="Project directory (repeat for several roots).",
    )
    _add_tree_options(tree)
    tree.add_argument(
        "--save",
        dest="save_path",
        default=None,
        help="Also write the tree to this file.",
    )

    # --- Token estimation ---
    tokens = sub.add_parser("tokens", help="Estimate the token count of a file or stdin.")
    tokens.add_argument("file", nargs="?", default=None, help="Text file (stdin when omitted).")
    tokens.add_argument("--model", default=None, help="Model used for precise counting.")
    tokens.add_argument(
        "--precise",
        action="store_true",
        help="Count with a BPE tokenizer instead of the 4-chars-per-token estimate.",
    )

    # --- Direct Gemini request ---
    ask = sub.add_parser("ask", help="Send a prompt to Gemini and print the answer.")
    ask.add_argument("prompt", help="User prompt text.")
    ask.add_argument("--system", dest="system_prompt", default=None, help="System instruction.")
    ask.add_argument("--model", default=None, help="Gemini model identifier.")

    # --- Relevant file discovery ---
    find = sub.add_parser("find-files", help="Ask Gemini which project files matter for a task.")
    find.add_argument("-i", "--input", dest="input_path", required=True, help="Project directory.")
    find.add_argument("-t", "--task", dest="task", required=True, help="Task description.")
    find.add_argument("--model", default=None, help="Gemini model identifier.")
    find.add_argument(
        "--exclude-file",
        dest="excluded_files",
        action="append",
        default=[],
        help="Project-relative path to leave out of the result (repeatable).",
    )
    _add_tree_options(find)

    # --- Configuration ---
    config = sub.add_parser("config", help="Show the effective configuration.")
    config.add_argument(
        "--dump",
        action="store_true",
        help="Print the configuration as JSON.",
    )
    config.add_argument(
        "--project",
        default=None,
        help="Apply the stored settings of this project directory.",
    )

    return p


def _add_tree_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--max-depth", dest="max_depth", type=int, default=None,
                        help="Deepest directory level to descend into.")
    parser.add_argument("--exclude", dest="exclude_patterns", default=None,
                        help="Comma-separated names to skip outside git repositories.")
    parser.add_argument("--include-hidden", action="store_true",
                        help="Keep dot-files outside git repositories.")
    parser.add_argument("--no-gitignore", action="store_true",
                        help="Ignore git and .gitignore rules.")

# -----------------------------------------------------------------------------
# ARGUMENT MAPPING
# -----------------------------------------------------------------------------

def args_to_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    """
    Translate the argparse Namespace into configuration overrides.

    Only options the user actually passed produce an entry.

    Args:
        args: Parsed command-line arguments.

    Returns:
        Dict[str, Any]: Configuration overrides subset.
    """
    overrides: Dict[str, Any] = {}

    if args.debug:
        overrides["log_level"] = "DEBUG"

    model = getattr(args, "model", None)
    if model and args.command in ("ask", "find-files"):
        overrides["gemini_model"] = model

    if getattr(args, "max_depth", None) is not None:
        overrides["max_depth"] = args.max_depth
    extra = _split_csv(getattr(args, "exclude_patterns", None))
    if extra:
        overrides["extra_exclude_patterns"] = extra
    if getattr(args, "include_hidden", False):
        overrides["include_hidden"] = True
    if getattr(args, "no_gitignore", False):
        overrides["respect_gitignore"] = False

    return overrides

# -----------------------------------------------------------------------------
# HELPERS
# -----------------------------------------------------------------------------

def _split_csv(value: Optional[str]) -> Optional[List[str]]:
    """
    Convert a comma-separated string into a list of sanitized strings.
    """
    if value is None:
        return None
    parts = [x.strip() for x in value.split(",")]
    return [x for x in parts if x]
