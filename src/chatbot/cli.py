import argparse
import json
import logging
import sys

from chatbot.config import settings


def setup_logging() -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def parse_message(message: str, use_llm: bool = False) -> int:
    """Print the parse of one message as JSON."""
    from chatbot.schemas import Intent
    from chatbot.services.parser import Parser

    parsed = None
    if use_llm and message.strip():
        from chatbot.ollama import OllamaClient
        from chatbot.services.llm_parser import LLMIntentParser

        with OllamaClient() as client:
            if client.is_available():
                parsed = LLMIntentParser(client).parse(message, user_id="cli")
            else:
                print("Ollama not available, using rule-based parser", file=sys.stderr)

        # An UNKNOWN answer from the model never overrides the rules.
        if parsed is not None and parsed.intent is Intent.UNKNOWN:
            print("Ollama answered UNKNOWN, using rule-based parser", file=sys.stderr)
            parsed = None

    if parsed is None:
        parsed = Parser().parse(message)

    print(json.dumps(parsed.model_dump(mode="json"), indent=2, ensure_ascii=False))
    return 0


def check_config() -> int:
    from chatbot.ollama import OllamaClient

    print("Chatbot Configuration Check\n")
    print(f"  Ollama URL: {settings.ollama_url}")
    print(f"  Ollama model: {settings.ollama_model}")
    print(f"  Timezone: {settings.user_timezone}")

    if not settings.has_ollama:
        print("  [-] Ollama: DISABLED")
        print("\nRule-based parsing only.")
        return 0

    with OllamaClient() as client:
        available = client.is_available()

    symbol = "+" if available else "-"
    status = "OK" if available else "UNREACHABLE"
    print(f"  [{symbol}] Ollama: {status}")
    print()
    if available:
        print("LLM-assisted parsing enabled.")
    else:
        print("Ollama not reachable. Messages will use the rule-based parser.")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Chat command interpreter")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    parse_cmd = subparsers.add_parser("parse", help="Parse a chat message")
    parse_cmd.add_argument("message", help="Message text")
    parse_cmd.add_argument("--llm", action="store_true", help="Try the Ollama backend first")
    subparsers.add_parser("check", help="Check configuration")

    args = parser.parse_args(argv)

    setup_logging()

    if args.command == "parse":
        return parse_message(args.message, use_llm=args.llm)
    if args.command == "check":
        return check_config()
    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
