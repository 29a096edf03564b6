#!/usr/bin/env python3
"""
Database Initialization Script

Run this script to create the SQLite database and seed the default
alert recipient from WHATSAPP_CHAT_ID.
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from config.settings import Settings
from config.database import configure_database, init_database, backup_database, get_recipients

def main():
    """Initialize the database and create a backup."""
    print("🚀 Initializing Menu Monitor Database...")
    print("=" * 50)

    settings = Settings.from_env()

    try:
        configure_database(settings.database_url)
        init_database(default_chat_id=settings.whatsapp_chat_id)
        print("✅ Database initialized successfully!")

        backup_path = backup_database()
        if backup_path:
            print(f"✅ Initial backup created: {backup_path}")
        else:
            print("⚠️  Could not create initial backup")

        print("\n📊 Database Structure:")
        print("   - recipients: WhatsApp alert recipients")

        recipients = get_recipients()
        print(f"\n👥 Recipients: {len(recipients)}")
        for recipient in recipients:
            print(f"   - {recipient['name']} ({'active' if recipient['active'] else 'paused'})")

    except Exception as e:
        print(f"❌ Error initializing database: {e}")
        sys.exit(1)

if __name__ == "__main__":
    main()
