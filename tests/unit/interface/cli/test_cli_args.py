from __future__ import annotations

"""
Unit tests for CLI Argument Parsing.

Verifies:
1. Subcommand schemas.
2. Mapping of CLI flags to configuration overrides.
3. CSV string parsing logic.
"""

import pytest

from plantocode.interface.cli.args import _split_csv, args_to_overrides, build_parser


def parse_args(arg_list):
    """Helper to simulate CLI argument parsing."""
    parser = build_parser()
    return parser.parse_args(arg_list)


def test_command_is_required() -> None:
    with pytest.raises(SystemExit):
        parse_args([])


def test_tree_accepts_multiple_roots() -> None:
    args = parse_args(["tree", "-i", "/a", "-i", "/b", "--save", "out.txt"])

    assert args.command == "tree"
    assert args.input_paths == ["/a", "/b"]
    assert args.save_path == "out.txt"


def test_tree_flags_mapping() -> None:
    args = parse_args([
        "--debug",
        "tree", "-i", "/a",
        "--max-depth", "2",
        "--exclude", "dist, coverage,",
        "--include-hidden",
        "--no-gitignore",
    ])

    overrides = args_to_overrides(args)

    assert overrides == {
        "log_level": "DEBUG",
        "max_depth": 2,
        "extra_exclude_patterns": ["dist", "coverage"],
        "include_hidden": True,
        "respect_gitignore": False,
    }


def test_no_flags_produce_no_overrides() -> None:
    assert args_to_overrides(parse_args(["config"])) == {}


def test_model_override_only_for_gemini_commands() -> None:
    ask = parse_args(["ask", "hello", "--model", "gemini-2.5-pro", "--system", "be brief"])
    tokens = parse_args(["tokens", "--model", "gpt-4o", "--precise"])

    assert args_to_overrides(ask) == {"gemini_model": "gemini-2.5-pro"}
    assert ask.system_prompt == "be brief"
    assert args_to_overrides(tokens) == {}
    assert tokens.file is None and tokens.precise is True


def test_find_files_arguments() -> None:
    args = parse_args([
        "--json",
        "find-files", "-i", "/repo", "-t", "add login",
        "--exclude-file", "a.ts", "--exclude-file", "b.ts",
    ])

    assert args.json_output is True
    assert args.input_path == "/repo"
    assert args.task == "add login"
    assert args.excluded_files == ["a.ts", "b.ts"]


def test_config_flags() -> None:
    args = parse_args(["--use-defaults", "config", "--dump", "--project", "/repo"])

    assert args.use_defaults is True
    assert args.dump is True
    assert args.project == "/repo"


def test_split_csv() -> None:
    assert _split_csv(None) is None
    assert _split_csv(" a, ,b ") == ["a", "b"]
    assert _split_csv("") == []
