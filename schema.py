"""Schema initialization for all database tables."""
from typing import Any
import glob
import os


def create_all(db: Any) -> None:
    """Create all database tables by loading the .sql files next to this module."""
    base_dir = os.path.dirname(os.path.abspath(__file__))

    # Sort for deterministic order
    sql_files = sorted(glob.glob(os.path.join(base_dir, '*.sql')))

    for sql_file in sql_files:
        with open(sql_file, 'r') as f:
            sql_content = f.read()
        # SQLite doesn't support multiple statements in one execute
        for statement in sql_content.split(';'):
            statement = '\n'.join(
                line for line in statement.splitlines() if not line.strip().startswith('--')
            ).strip()
            if statement:
                db.execute(statement)

    db.commit()
