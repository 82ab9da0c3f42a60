#!/usr/bin/env python3
"""
Script to add a book to the Circulate catalog through the API.
"""
import argparse
import sys
from pathlib import Path

import httpx

sys.path.insert(0, str(Path(__file__).parent.parent))

from circulate.core.client import CirculateClient


def main():
    parser = argparse.ArgumentParser(
        description="Add a book to the Circulate catalog (requires an admin account)"
    )
    parser.add_argument("--url", default=CirculateClient.BASE_URL, help="Circulate API base URL")
    parser.add_argument("--username", required=True, help="Administrator username")
    parser.add_argument("--password", required=True, help="Administrator password")
    parser.add_argument("--name", required=True, help="Book title")
    parser.add_argument("--author", required=True)
    parser.add_argument("--genre", required=True)
    parser.add_argument("--type", default="Paperback", help="Medium, e.g. Hardcover or Audiobook")

    args = parser.parse_args()

    client = CirculateClient(base_url=args.url)
    try:
        client.signin(args.username, args.password)
        book = client.add_book(args.name, args.author, args.genre, args.type)
    except httpx.HTTPStatusError as e:
        if e.response.status_code == 403:
            print(f"✗ {args.username} is not an administrator.")
        else:
            print(f"✗ Failed to add book: {e.response.text}")
        sys.exit(1)
    except httpx.HTTPError as e:
        print(f"✗ Could not reach {args.url}: {e}")
        sys.exit(1)

    print(f"✓ Added book {book['id']}: {book['name']} by {book['author']}")


if __name__ == "__main__":
    main()
