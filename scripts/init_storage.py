#!/usr/bin/env python3
"""
Storage Initialization Script

Run this script to create the AfiaTrack data store and take a first backup.
"""

import sys
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from config import settings
from config.database import init_storage, backup_storage
from config.models import COLLECTIONS


def main():
    """Initialize the store and create a backup."""
    print("🚀 Initializing AfiaTrack storage...")
    print("=" * 50)

    try:
        init_storage()
        print(f"✅ Storage initialized ({settings.STORAGE_BACKEND})")

        backup_path = backup_storage()
        if backup_path:
            print(f"✅ Initial backup created: {backup_path}")
        else:
            print("⚠️  No backup created for this backend")

        print("\n📊 Collections:")
        for collection in COLLECTIONS:
            print(f"   - {collection}")

    except Exception as e:
        print(f"❌ Error initializing storage: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
