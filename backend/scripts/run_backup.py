#!/usr/bin/env python3
"""Write a JSON backup of the configured TechWriter database."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from techwriter.backup import BackupManager
from techwriter.config import settings
from techwriter.db import open_store


def main() -> None:
    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    with open_store(settings.database_url) as store:
        manager = BackupManager(store, backup_dir=settings.backup_dir)
        backup_path = manager.export_to_file()
    print(backup_path)


if __name__ == "__main__":
    main()
