#!/usr/bin/env python3
"""Create the database tables and seed defaults for the SQL storage backend."""
import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from tutalink import create_app

def init_database():
    # create_app builds the schema and seeds the admin, config keys and footer.
    app = create_app({"STORAGE_BACKEND": "sql"})
    print(f"✅ Database initialized at {app.config['SQLALCHEMY_DATABASE_URI']}")

if __name__ == "__main__":
    init_database()
