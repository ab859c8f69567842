import argparse
import logging
import os
import sys

from aiproviders import PROVIDERS
from aiproviders import ensure_provider_credentials
from aiproviders import get_current_provider
from aiproviders import provider_selection_menu
from aiproviders import set_provider
from configreader import apply_env_overrides
from configreader import load_config
from llm_engine import generate_command_for_error
from llm_engine import generate_command_for_message


def configure_logging(verbose: bool):
    if verbose:
        level = logging.DEBUG
    else:
        level = getattr(logging, os.environ.get("T_LOG_LEVEL", "WARNING").upper(), logging.WARNING)

    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="t", description="Suggest a shell command with AI")
    parser.add_argument("--config", help="Path to the config file (default ~/.t.env)")
    parser.add_argument("--error-log", help="Path to the error log (default ~/.t_error)")
    parser.add_argument(
        "--provider",
        choices=list(PROVIDERS),
        help="Use this provider for one request without saving it.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log diagnostics to stderr")

    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("fix", help="Suggest a fix for the last failed command")

    ask = sub.add_parser("ask", help="Suggest a command for a request")
    ask.add_argument("message", nargs="+", help="What you want to do")

    prov = sub.add_parser("provider", help="Show or set the AI provider (saved to config)")
    prov.add_argument("name", nargs="?", choices=list(PROVIDERS))

    sub.add_parser("switch", help="Interactively switch AI provider (saved to config)")

    return parser


def switch_provider(cfg: dict) -> str:
    provider = provider_selection_menu(title="Switch AI Provider")
    if not provider:
        return get_current_provider(cfg)

    if not ensure_provider_credentials(cfg, provider):
        print("Provider not changed.")
        return get_current_provider(cfg)

    return set_provider(cfg, provider)


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.verbose)

    # --config / --error-log override the paths through the same env vars
    if args.config:
        os.environ["T_CONFIG"] = os.path.expanduser(args.config)
    if args.error_log:
        os.environ["T_ERROR_LOG"] = os.path.expanduser(args.error_log)

    cfg = load_config()

    if args.command == "provider":
        if args.name:
            print(set_provider(cfg, args.name))
        else:
            print(get_current_provider(cfg))
        return 0

    if args.command == "switch":
        provider = switch_provider(cfg)
        print(f"AI provider: {PROVIDERS[provider]['label']}")
        return 0

    # Env credentials apply to this run only; they are never written back.
    request_cfg = dict(cfg)
    apply_env_overrides(request_cfg)

    if args.command == "fix":
        print(generate_command_for_error(request_cfg, args.provider))
    else:
        print(generate_command_for_message(" ".join(args.message), request_cfg, args.provider))
    return 0


if __name__ == "__main__":
    sys.exit(main())
