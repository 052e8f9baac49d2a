"""CLI script to load subjects from a JSON or CSV file into the store.
Usage: python scripts/seed_subjects.py FILE [--dry-run]
"""
import sys
import argparse
import pathlib
# Ensure `backend/` is on sys.path so `agenda` package imports work when running this script directly
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
from sqlmodel import Session
from agenda.config import Settings
from agenda.database import build_engine, create_db_and_tables
from agenda import services
from agenda.utils.parsers import parse_subject_file


def main(path: pathlib.Path, dry_run: bool = False, settings: Settings = None) -> dict:
    """Parse `path` and insert one subject per record.

    The database location comes from `DB_PATH` (see `agenda.config`);
    tables are created first when the store is new. Returns the import
    summary and prints it for a quick CLI feedback loop.
    """
    cfg = settings or Settings()
    records = parse_subject_file(path.read_bytes(), path.name)
    engine = build_engine(cfg.DB_PATH)
    try:
        create_db_and_tables(engine, cfg.DB_PATH)
        with Session(engine) as session:
            result = services.SubjectService(session).import_records(records, dry_run=dry_run)
    finally:
        engine.dispose()
    print(f"Loaded {path}: created {result['created']}, errors {len(result['errors'])}")
    for err in result['errors']:
        print(f"  record {err['index']}: {err['error']}")
    return result


if __name__ == '__main__':
    parser = argparse.ArgumentParser()
    parser.add_argument('file', type=pathlib.Path, help='JSON array or CSV file of subjects')
    parser.add_argument('--dry-run', action='store_true', help='Parse and validate without writing')
    args = parser.parse_args()
    main(args.file, dry_run=args.dry_run)
