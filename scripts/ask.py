from __future__ import annotations

import argparse

from jurispol.client import RelayClient
from jurispol.logging_config import configure_logging
from jurispol.observability import setup_tracing
from jurispol.settings import settings
from jurispol.state import ChatSession


def print_turn(session: ChatSession) -> None:
    if session.state.error:
        print(f"❌ {session.state.error}")
        return
    last = session.state.messages[-1]
    print(last.content)
    if last.sources:
        print("\nFuentes consultadas:")
        for s in last.sources:
            print(f"- {s.title}: {s.uri}")


def main():
    parser = argparse.ArgumentParser(description="Consulta JurisPol desde la terminal.")
    parser.add_argument("question", nargs="?", help="pregunta; sin ella se abre un modo interactivo")
    parser.add_argument("--api", default=settings.api_url)
    parser.add_argument("--timeout", type=int, default=settings.request_timeout)
    args = parser.parse_args()

    configure_logging("jurispol-cli", level="WARNING")
    if settings.otel_enabled:
        setup_tracing("jurispol-cli", settings.otel_endpoint, instrument_requests=True)
    session = ChatSession(RelayClient(args.api, args.timeout))

    if args.question:
        session.send(args.question)
        print_turn(session)
        return

    # interactive: the session keeps the history between questions
    while True:
        try:
            question = input("\n> ")
        except (EOFError, KeyboardInterrupt):
            break
        if question.strip() in {"/salir", "/exit"}:
            break
        if question.strip() == "/limpiar":
            session.clear()
            continue
        if session.send(question) is None and not session.state.error:
            continue
        print_turn(session)


if __name__ == "__main__":
    main()
