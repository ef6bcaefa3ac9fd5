from pathlib import Path

from ridecoach.models import Base


def test_required_tables_present_in_migration():
    text = Path("alembic/versions/20261016_0001_ride_store.py").read_text()
    for t in ["rides", "athlete_profiles", "training_plans"]:
        assert f'"{t}"' in text


def test_migration_matches_model_tables():
    text = Path("alembic/versions/20261016_0001_ride_store.py").read_text()
    for table in Base.metadata.tables.values():
        for column in table.columns:
            assert f'"{column.name}"' in text, f"{table.name}.{column.name} missing from migration"


def test_migrations_avoid_postgres_now_function_for_portability():
    migrations_dir = Path("alembic/versions")
    for migration_file in migrations_dir.glob("*.py"):
        text = migration_file.read_text(encoding="utf-8").lower()
        assert "now()" not in text, f"Non-portable now() found in {migration_file.name}"
