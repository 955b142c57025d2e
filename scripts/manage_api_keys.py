#!/usr/bin/env python3
"""
CLI for API Key Management.

Issues keys outside the public portal, lists issued keys and checks
whether a key is valid.
"""

import argparse
import asyncio
import sys

from movies_api.auth.api_key import normalize_api_key
from movies_api.repositories.api_key_repository import ApiKeyRepository


def mask_api_key(api_key: str) -> str:
    """Show only the prefix and last four characters of a key."""
    if len(api_key) <= 12:
        return "*" * len(api_key)
    return f"{api_key[:5]}…{api_key[-4:]}"


async def cmd_issue(
    name: str, email: str, repo: ApiKeyRepository | None = None
) -> str:
    """
    Issue a new API key and print it.

    Args:
        name: Key holder name
        email: Key holder contact email
        repo: Key store (a default one when omitted)

    Returns:
        The new API key
    """
    repo = repo or ApiKeyRepository()
    api_key = await repo.issue(name, email)

    print("✓ API Key issued successfully")
    print(f"\nAPI Key: {api_key}")
    print("\n⚠️  IMPORTANT: Save this API key now!")
    print("   It will not be shown again.")
    print(f"\nHolder: {name} <{email}>")
    return api_key


async def cmd_list(repo: ApiKeyRepository | None = None) -> None:
    """List issued API keys with masked values."""
    repo = repo or ApiKeyRepository()
    keys = await repo.list_all()

    if not keys:
        print("No API keys found.")
        return

    print(f"\n{'Key':<16} {'Created':<28} {'Holder':<40}")
    print("-" * 84)
    for key in keys:
        holder = f"{key.name} <{key.email}>"
        if len(holder) > 37:
            holder = holder[:37] + "..."
        print(f"{mask_api_key(key.api_key):<16} {key.created_at:<28} {holder:<40}")

    print(f"\nTotal: {len(keys)} API keys")


async def cmd_check(api_key: str, repo: ApiKeyRepository | None = None) -> bool:
    """
    Check whether a key is valid.

    Args:
        api_key: Key to check (surrounding whitespace is ignored)
        repo: Key store (a default one when omitted)

    Returns:
        True if the key was issued
    """
    repo = repo or ApiKeyRepository()
    key = normalize_api_key(api_key)
    valid = bool(key) and await repo.is_valid(key)

    if valid:
        print(f"✓ {mask_api_key(key)} is valid")
    else:
        print("✗ API key is not valid")
    return valid


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        description="Manage API keys for the Movies Open API",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command")

    issue_parser = subparsers.add_parser("issue", help="Issue a new API key")
    issue_parser.add_argument("--name", required=True, help="Key holder name")
    issue_parser.add_argument("--email", required=True, help="Key holder email")

    subparsers.add_parser("list", help="List issued API keys")

    check_parser = subparsers.add_parser("check", help="Check an API key")
    check_parser.add_argument("api_key", type=str, help="API key to check")

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        sys.exit(1)

    if args.command == "issue":
        asyncio.run(cmd_issue(args.name, args.email))
    elif args.command == "list":
        asyncio.run(cmd_list())
    elif args.command == "check":
        if not asyncio.run(cmd_check(args.api_key)):
            sys.exit(1)


if __name__ == "__main__":
    main()
