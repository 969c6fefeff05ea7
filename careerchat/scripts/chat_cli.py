from __future__ import annotations

import argparse
import asyncio
import logging

from careerchat.core.logging import configure_logging
from careerchat.core.settings import get_settings
from careerchat.models.chat import UserProfile
from careerchat.services.chat_client import ChatClient

logger = logging.getLogger(__name__)

_EXIT_WORDS = {"quit", "exit"}


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Ask the AI career advisor questions.")
    parser.add_argument("--name")
    parser.add_argument("--title")
    parser.add_argument("--location")
    parser.add_argument("--interests", help="Comma separated list")
    parser.add_argument("--bio")
    return parser.parse_args(argv)


def _profile_from_args(args: argparse.Namespace) -> UserProfile:
    interests = [i.strip() for i in (args.interests or "").split(",") if i.strip()]
    return UserProfile(
        name=args.name,
        title=args.title,
        location=args.location,
        interests=interests or None,
        bio=args.bio,
    )


async def run(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    profile = _profile_from_args(args)
    client = ChatClient.from_settings(get_settings())

    print("AI Career Advisor. Type 'quit' or 'exit' to leave.")
    while True:
        try:
            question = input("\nYou: ").strip()
        except EOFError:
            break
        if not question:
            continue
        if question.lower() in _EXIT_WORDS:
            break

        result = await client.generate_career_advice(profile, question)
        if result.success:
            print(f"\nAdvisor: {result.message}")
        else:
            print(f"\nError: {result.error}")


def main() -> None:
    configure_logging(get_settings())
    asyncio.run(run())


if __name__ == "__main__":
    main()
