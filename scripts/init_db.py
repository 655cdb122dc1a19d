#!/usr/bin/env python3
"""Initialize database tables"""
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from braids import create_app
from braids.extensions import db


def init_database(app=None):
    app = app or create_app()
    with app.app_context():
        db.create_all()
        print(f"Database tables initialized: {', '.join(sorted(db.metadata.tables))}")


if __name__ == "__main__":
    init_database()
