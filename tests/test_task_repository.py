"""Tests for TaskRepository operations."""

from datetime import date, timedelta
from unittest.mock import patch

from trayplan.database.models import TaskDB
from trayplan.database.repository import TaskRepository
from trayplan.models.phase import Phase
from trayplan.models.task import TaskKind, TaskSource, TaskStatus
from trayplan.models.task_factory import create_generated_task, create_user_task, make_generator_key


class TestTaskRepository:
    """Test TaskRepository CRUD operations."""
    
    def test_create_and_get_task(self, task_repository):
        """Test creating and retrieving a user task."""
        created = task_repository.create(create_user_task("  Clean racks  ", date(2025, 3, 12)))
        retrieved = task_repository.get(created.id)
        
        assert retrieved is not None
        assert retrieved.title == "Clean racks"
        assert retrieved.status == TaskStatus.PLANNED
        assert retrieved.source == TaskSource.MANUAL
        assert retrieved.generator_key is None
    
    def test_get_nonexistent_task(self, task_repository):
        """Test retrieving a nonexistent task returns None."""
        assert task_repository.get("nonexistent-id") is None

    def test_get_in_range_filters_by_day_and_source(self, task_repository):
        task_repository.create(create_user_task("Before", date(2025, 3, 9)))
        task_repository.create(create_user_task("Inside", date(2025, 3, 10)))
        task_repository.create(create_generated_task(date(2025, 3, 11), Phase.SOW, TaskKind.SUMMARY, "SYS:Sow + Stack (Blackout)"))
        task_repository.create(create_user_task("After", date(2025, 3, 12)))

        in_range = task_repository.get_in_range(date(2025, 3, 10), date(2025, 3, 11))
        assert [t.title for t in in_range] == ["Inside", "SYS:Sow + Stack (Blackout)"]

        generated = task_repository.get_in_range(date(2025, 3, 1), date(2025, 3, 31), source=TaskSource.GENERATED)
        assert [t.due_date for t in generated] == [date(2025, 3, 11)]

    def test_update_status(self, task_repository):
        created = task_repository.create(create_user_task("Harvest pea", date(2025, 3, 19)))
        updated = task_repository.update_status(created.id, TaskStatus.DONE)
        assert updated.status == TaskStatus.DONE
        assert task_repository.update_status("missing", TaskStatus.DONE) is None


class TestGeneratedTaskWrites:
    """Delete-in-range and upsert on (source, generator_key)."""

    def test_delete_generated_in_range_is_inclusive(self, task_repository):
        for day in (date(2025, 3, 9), date(2025, 3, 10), date(2025, 3, 12), date(2025, 3, 13)):
            task_repository.create(create_generated_task(day, Phase.WATER, TaskKind.SUMMARY, "SYS:Water"))
        task_repository.create(create_user_task("Water by hand", date(2025, 3, 11)))

        deleted = task_repository.delete_generated_in_range(date(2025, 3, 10), date(2025, 3, 12))

        assert deleted == 2
        remaining = task_repository.get_all()
        assert [(t.due_date, t.source) for t in remaining] == [
            (date(2025, 3, 9), TaskSource.GENERATED),
            (date(2025, 3, 11), TaskSource.MANUAL),
            (date(2025, 3, 13), TaskSource.GENERATED),
        ]

    def test_upsert_overwrites_on_same_generator_key(self, task_repository):
        day = date(2025, 3, 12)
        first = create_generated_task(day, Phase.SOW, TaskKind.DETAIL, "SYS:DETAIL:Sow + Stack (Blackout) — Pea → Cafe B x5")
        task_repository.upsert_generated([first])

        second = create_generated_task(day, Phase.SOW, TaskKind.DETAIL, "SYS:DETAIL:Sow + Stack (Blackout) — Pea → Cafe B x7")
        written = task_repository.upsert_generated([second])

        assert written == 1
        rows = task_repository.get_all()
        assert len(rows) == 1
        assert rows[0].title.endswith("x7")
        # Existing row keeps its identity
        assert rows[0].id == first.id
        assert rows[0].generator_key == make_generator_key(day, Phase.SOW, TaskKind.DETAIL)

    def test_upsert_empty_batch(self, task_repository):
        assert task_repository.upsert_generated([]) == 0

    def test_upsert_large_batch_is_chunked(self, task_repository):
        tasks = [
            create_generated_task(date(2025, 1, 1) + timedelta(days=i), Phase.WATER, kind, "SYS:Water")
            for i in range(60)
            for kind in (TaskKind.SUMMARY, TaskKind.DETAIL)
        ]
        assert task_repository.upsert_generated(tasks) == 120
        assert len(task_repository.get_all()) == 120

    def test_user_tasks_do_not_conflict(self, task_repository):
        task_repository.create(create_user_task("One", date(2025, 3, 12)))
        task_repository.create(create_user_task("Two", date(2025, 3, 12)))
        assert len(task_repository.get_all()) == 2

    def test_phase_round_trips_as_enum(self, db_session, task_repository):
        created = task_repository.create(create_generated_task(date(2025, 3, 12), Phase.LIGHTS_ON, TaskKind.SUMMARY, "SYS:Lights On"))
        assert task_repository.get(created.id).phase == Phase.LIGHTS_ON

        row = db_session.query(TaskDB).filter(TaskDB.id == created.id).first()
        row.phase = "unknown-phase"
        db_session.commit()

        assert task_repository.get(created.id).phase is None

    def test_merge_path_for_dialects_without_on_conflict(self, task_repository):
        day = date(2025, 3, 12)
        user_task = task_repository.create(create_user_task("Sow by hand", day))
        first = create_generated_task(day, Phase.SOW, TaskKind.DETAIL, "SYS:DETAIL:Sow + Stack (Blackout) — Pea → Cafe B x5")
        second = create_generated_task(day, Phase.SOW, TaskKind.DETAIL, "SYS:DETAIL:Sow + Stack (Blackout) — Pea → Cafe B x7")
        summary = create_generated_task(day, Phase.SOW, TaskKind.SUMMARY, "SYS:Sow + Stack (Blackout)")

        with patch.object(TaskRepository, "_dialect_name", return_value="mssql"):
            assert task_repository.upsert_generated([first]) == 1
            assert task_repository.upsert_generated([second, summary]) == 2

        generated = task_repository.get_in_range(day, day, source=TaskSource.GENERATED)
        assert len(generated) == 2
        detail = task_repository.get_by_generator_key(make_generator_key(day, Phase.SOW, TaskKind.DETAIL))
        assert detail.id == first.id
        assert detail.title.endswith("x7")
        assert task_repository.get(user_task.id).title == "Sow by hand"
