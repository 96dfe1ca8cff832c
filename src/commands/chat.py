#!/usr/bin/env python3
"""
Chat command: ask questions about the ingested articles.
"""

from argparse import Namespace

from .base import BaseCommand
from core.models.chat import ChatResponse, ResponseType


def format_response(response: ChatResponse) -> str:
    """Human-readable rendering of a chat response."""
    lines = [response.answer.rstrip()]
    if response.sources and response.response_type != ResponseType.ARTICLE_LIST:
        lines.append("")
        lines.append("Sources:")
        for source in response.sources:
            title = f" - {source.title}" if source.title else ""
            lines.append(f"  {source.url}{title}")
    lines.append("")
    lines.append(f"[task: {response.task}]")
    return "\n".join(lines)


class ChatCommand(BaseCommand):
    """Answer natural-language questions through the planner and handlers."""

    def execute(self, subcommand: str, args: Namespace) -> int:
        return self.dispatch(subcommand, args, "chat")

    def ask(self, args: Namespace) -> int:
        """Answer a single query."""
        response = self.chat_service.ask(args.query, use_cache=not args.no_cache)

        if args.json:
            self.print_json(response.to_dict())
        else:
            print(format_response(response))
        return 0

    def repl(self, args: Namespace) -> int:
        """Interactive loop with the cache sweeper running in the background."""
        sweeper = self.create_cache_sweeper()
        sweeper.start()
        print("Ask about your articles. Empty line or Ctrl-D to quit.")

        try:
            while True:
                try:
                    query = input("> ").strip()
                except EOFError:
                    break
                if not query:
                    break

                try:
                    response = self.chat_service.ask(query, use_cache=not args.no_cache)
                except Exception as e:
                    self.handle_error(e, "chat")
                    print(f"Error: {e}")
                    continue
                print(format_response(response))
                print()

        except KeyboardInterrupt as e:
            return self.handle_error(e, "chat repl")
        finally:
            sweeper.stop()
        return 0
