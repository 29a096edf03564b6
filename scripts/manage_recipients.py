#!/usr/bin/env python3
"""
Manage Alert Recipients

Usage:
    python scripts/manage_recipients.py list
    python scripts/manage_recipients.py add "Kitchen" 355691234567@c.us
    python scripts/manage_recipients.py remove <id>
    python scripts/manage_recipients.py toggle <id>
"""

import sys
import argparse
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from config.settings import Settings
from config.database import (
    configure_database,
    init_database,
    get_recipients,
    add_recipient,
    remove_recipient,
    toggle_recipient,
)

def show_recipients():
    """Print all recipients."""
    print("👥 Alert Recipients:")
    print("-" * 40)

    recipients = get_recipients()
    if not recipients:
        print("No recipients configured.")
        return

    for recipient in recipients:
        state = "active" if recipient['active'] else "paused"
        print(f"[{recipient['id']}] {recipient['name']}: {recipient['chatId'] or '(no chat id)'} ({state})")

def main():
    parser = argparse.ArgumentParser(description="Manage WhatsApp alert recipients")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("list", help="Show all recipients")

    add = sub.add_parser("add", help="Add a recipient")
    add.add_argument("name")
    add.add_argument("chat_id", help="Green API chat id, e.g. 355691234567@c.us")
    add.add_argument("--paused", action="store_true", help="Create the recipient inactive")

    remove = sub.add_parser("remove", help="Delete a recipient")
    remove.add_argument("recipient_id", type=int)

    toggle = sub.add_parser("toggle", help="Pause or resume a recipient")
    toggle.add_argument("recipient_id", type=int)

    args = parser.parse_args()

    configure_database(Settings.from_env().database_url)
    init_database()

    if args.command == "add":
        recipient = add_recipient(args.name, args.chat_id, active=not args.paused)
        print(f"✅ Added recipient {recipient['id']}: {recipient['name']}")
    elif args.command == "remove":
        if remove_recipient(args.recipient_id):
            print(f"✅ Removed recipient {args.recipient_id}")
        else:
            print(f"❌ Recipient {args.recipient_id} not found")
            sys.exit(1)
    elif args.command == "toggle":
        recipient = toggle_recipient(args.recipient_id)
        if recipient is None:
            print(f"❌ Recipient {args.recipient_id} not found")
            sys.exit(1)
        print(f"✅ Recipient {recipient['id']} is now {'active' if recipient['active'] else 'paused'}")
    else:
        show_recipients()

if __name__ == "__main__":
    main()
