from __future__ import annotations

"""
Command Line Interface (CLI) Application Controller.

Orchestrates the CLI lifecycle: logging bootstrap, configuration
resolution (defaults, persistent storage, project settings and CLI
overrides), command dispatch and result rendering.
"""

import argparse
import json
import os
import sys
from dataclasses import asdict
from typing import Any, Dict, List, Optional

from plantocode.core.analysis.tree_generator import (
    get_combined_directory_tree,
    generate_directory_tree,
    save_tree,
)
from plantocode.core.processing.tokenizer import count_tokens, estimate_tokens
from plantocode.core.services.file_lister import DirectoryTreeOptions
from plantocode.core.services.path_finder import PathFinderError, find_relevant_files
from plantocode.core.validator import validate_config
from plantocode.domain.config import get_default_config, load_config, load_project_settings
from plantocode.domain.gemini_models import GeminiError
from plantocode.infra.fs import normalize_path
from plantocode.infra.logging import LoggingConfig, configure_logging, get_logger
from plantocode.infra.network.gemini_client import (
    client_from_env,
    options_from_config,
    send_prompt,
)
from plantocode.interface.cli import args as cli_args

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_BAD_INPUT = 2
EXIT_INTERRUPTED = 130

# -----------------------------------------------------------------------------
# ENTRYPOINT ORCHESTRATOR
# -----------------------------------------------------------------------------

def main(argv: Optional[List[str]] = None) -> int:
    """
    Execute the CLI workflow.

    Args:
        argv: Optional list of command line arguments. Defaults to sys.argv.

    Returns:
        int: Process exit code.
    """
    if sys.platform == "win32":
        if hasattr(sys.stdout, "reconfigure"):
            sys.stdout.reconfigure(encoding="utf-8")
        if hasattr(sys.stderr, "reconfigure"):
            sys.stderr.reconfigure(encoding="utf-8")

    # 1. Argument parsing phase
    parser = cli_args.build_parser()
    args = parser.parse_args(argv)

    # 2. Configuration hierarchy
    base_conf = get_default_config() if args.use_defaults else load_config()
    project = _project_directory(args)
    if project and not args.use_defaults:
        base_conf = load_project_settings(project, base_config=base_conf)

    raw_conf = _merge_config(base_conf, cli_args.args_to_overrides(args))
    clean_conf, warnings = validate_config(raw_conf, strict=False)

    # 3. Logging bootstrap
    logging_conf = LoggingConfig(
        level=clean_conf["log_level"],
        console=True,
        log_file=clean_conf["log_file"] or None,
    )
    configure_logging(logging_conf)

    for w in warnings:
        logger.warning(f"Configuration Constraint: {w}")
    logger.debug(f"CLI command '{args.command}' initiated.")

    # 4. Command dispatch
    handler = _COMMANDS[args.command]
    try:
        return handler(args, clean_conf)
    except KeyboardInterrupt:
        logger.warning("Operation interrupted by user.")
        print("Interrupted.", file=sys.stderr)
        return EXIT_INTERRUPTED
    except Exception as e:
        logger.critical(f"Command '{args.command}' failed: {e}", exc_info=True)
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_FAILURE

# -----------------------------------------------------------------------------
# COMMAND HANDLERS
# -----------------------------------------------------------------------------

def _run_tree(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    roots = [normalize_path(p, os.getcwd()) for p in args.input_paths]
    missing = [r for r in roots if not os.path.isdir(r)]
    if missing:
        return _bad_input(f"Directory does not exist: {missing[0]}")

    options = _tree_options(config)
    if len(roots) == 1:
        tree_text = generate_directory_tree(roots[0], options)
    else:
        tree_text = get_combined_directory_tree(roots, options)

    saved = None
    if args.save_path:
        if not save_tree(tree_text, args.save_path):
            print(f"ERROR: Could not write tree to {args.save_path}", file=sys.stderr)
            return EXIT_FAILURE
        saved = args.save_path

    if args.json_output:
        _print_json({"roots": roots, "tree": tree_text, "saved_to": saved})
    else:
        print(tree_text)
    return EXIT_OK


def _run_tokens(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    if args.file:
        if not os.path.isfile(args.file):
            return _bad_input(f"File does not exist: {args.file}")
        with open(args.file, "r", encoding="utf-8", errors="replace") as f:
            text = f.read()
    else:
        text = sys.stdin.read()

    if args.precise:
        model = args.model or config["gemini_model"]
        tokens = count_tokens(text, model)
    else:
        model = None
        tokens = estimate_tokens(text)

    if args.json_output:
        _print_json({"tokens": tokens, "characters": len(text), "precise": args.precise, "model": model})
    else:
        print(tokens)
    return EXIT_OK


def _run_ask(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    if not args.prompt.strip():
        return _bad_input("Prompt cannot be empty.")

    options = options_from_config(config, system_prompt=args.system_prompt)
    result = send_prompt(args.prompt, options)

    if args.json_output:
        _print_json(asdict(result))
    elif result.is_success:
        print(result.data)
    else:
        print(f"ERROR: {result.message}", file=sys.stderr)
    return EXIT_OK if result.is_success else EXIT_FAILURE


def _run_find_files(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    project = normalize_path(args.input_path, os.getcwd())
    if not os.path.isdir(project):
        return _bad_input(f"Directory does not exist: {project}")
    if not args.task.strip():
        return _bad_input("Task description cannot be empty.")

    try:
        result = find_relevant_files(
            project,
            args.task,
            client=client_from_env(),
            options=options_from_config(config),
            excluded_files=args.excluded_files,
            tree_options=_tree_options(config),
        )
    except (PathFinderError, GeminiError) as e:
        logger.error(f"Path finder failed: {e}")
        print(f"ERROR: {e}", file=sys.stderr)
        return EXIT_FAILURE

    if args.json_output:
        _print_json(asdict(result))
    else:
        for path in result.paths:
            print(path)
    return EXIT_OK


def _run_config(args: argparse.Namespace, config: Dict[str, Any]) -> int:
    if args.dump or args.json_output:
        _print_json(config)
    else:
        for key in sorted(config):
            print(f"{key} = {config[key]}")
    return EXIT_OK


_COMMANDS = {
    "tree": _run_tree,
    "tokens": _run_tokens,
    "ask": _run_ask,
    "find-files": _run_find_files,
    "config": _run_config,
}

# -----------------------------------------------------------------------------
# CONFIGURATION MERGING
# -----------------------------------------------------------------------------

def _merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Perform a shallow merge of override values into the base configuration.

    Extra exclude patterns extend the configured list instead of
    replacing it.

    Args:
        base: The primary configuration dictionary.
        overrides: New values to inject.

    Returns:
        Dict[str, Any]: The merged configuration state.
    """
    out = dict(base)
    keys_to_merge = [
        "gemini_model", "log_level", "max_depth",
        "include_hidden", "respect_gitignore",
    ]
    for k in keys_to_merge:
        if k in overrides and overrides[k] is not None:
            out[k] = overrides[k]

    extra = overrides.get("extra_exclude_patterns")
    if extra:
        current = out.get("exclude_patterns")
        current = list(current) if isinstance(current, list) else []
        out["exclude_patterns"] = current + [p for p in extra if p not in current]
    return out


def _tree_options(config: Dict[str, Any]) -> DirectoryTreeOptions:
    return DirectoryTreeOptions(
        max_depth=config["max_depth"],
        respect_gitignore=config["respect_gitignore"],
        exclude_patterns=tuple(config["exclude_patterns"]),
        include_hidden=config["include_hidden"],
    )


def _project_directory(args: argparse.Namespace) -> Optional[str]:
    """Resolve the project whose stored settings apply, normalized like the command input."""
    if args.command == "find-files":
        raw = args.input_path
    elif args.command == "tree" and len(args.input_paths) == 1:
        raw = args.input_paths[0]
    elif args.command == "config":
        raw = args.project
    else:
        return None
    return normalize_path(raw, os.getcwd()) if raw else None

# -----------------------------------------------------------------------------
# VIEW RENDERING
# -----------------------------------------------------------------------------

def _bad_input(msg: str) -> int:
    logger.error(msg)
    print(f"ERROR: {msg}", file=sys.stderr)
    return EXIT_BAD_INPUT


def _print_json(data: Any) -> None:
    print(json.dumps(data, ensure_ascii=False, indent=2))

# -----------------------------------------------------------------------------
# CLI ENTRYPOINT
# -----------------------------------------------------------------------------

if __name__ == "__main__":
    sys.exit(main())
