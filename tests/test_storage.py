"""Tests für Persistenz: Single-Flight-Speichern, Selbstheilung, Mitternachts-Timer."""

import asyncio
import json
import logging
from datetime import date, datetime, timedelta
from pathlib import Path

import pytest

from config.defaults import default_app_config
from data.demo_profile import build_demo_profile
from models import Profile, TargetType, TodayConfig
from storage import (
    Debouncer,
    LocalFileAccess,
    ProfileStore,
    Regenerator,
    RetrySaver,
    ScheduleContext,
    TodayConfigStore,
    parse_profile,
)

PROFILE_PATH = "profiles/test.profile.json"
TODAY_PATH = "test.todayConfig.json"
MONDAY = datetime(2024, 1, 8, 9, 0)   # B-Woche bei Anker 01.01.2024


# ─── Hilfsklassen ─────────────────────────────────────────────────────────────

class MemoryFiles:
    """FileAccess im Speicher; die ersten ``fail_writes`` Schreibvorgänge scheitern."""

    def __init__(self, files: dict | None = None, fail_writes: int = 0):
        self.files: dict[str, str] = dict(files or {})
        self.writes: list[str] = []
        self.fail_writes = fail_writes

    async def exists(self, path: str) -> bool:
        return path in self.files

    async def read_file(self, path: str) -> str:
        if path not in self.files:
            raise FileNotFoundError(path)
        return self.files[path]

    async def write_file(self, path: str, text: str) -> None:
        await asyncio.sleep(0)
        if self.fail_writes > 0:
            self.fail_writes -= 1
            raise OSError("Datenträger voll")
        self.files[path] = text
        self.writes.append(path)


class FakeClock:
    """Uhr + Wartefunktion: sleep() stellt die Uhr vor, höchstens um ``max_step`` Sekunden."""

    def __init__(self, now: datetime, max_step: float | None = None):
        self.now = now
        self.max_step = max_step
        self.sleeps: list[float] = []

    def __call__(self) -> datetime:
        return self.now

    async def sleep(self, seconds: float) -> None:
        step = seconds if self.max_step is None else min(seconds, self.max_step)
        self.sleeps.append(step)
        self.now += timedelta(seconds=step)
        await asyncio.sleep(0)


async def _sleep_forever(_seconds: float) -> None:
    await asyncio.Event().wait()


def _demo_profile() -> Profile:
    return build_demo_profile(date(2024, 1, 1))


# ─── RETRY-SAVER ──────────────────────────────────────────────────────────────

class TestRetrySaver:
    def test_requests_during_write_coalesce_to_one(self):
        """Drei Anforderungen während eines Schreibvorgangs → genau ein Nachholen."""
        async def scenario():
            gate = asyncio.Event()
            active = 0
            max_active = 0
            calls = 0

            async def action():
                nonlocal active, max_active, calls
                calls += 1
                active += 1
                max_active = max(max_active, active)
                await gate.wait()
                active -= 1

            saver = RetrySaver(action, "Test")
            saver.request()
            await asyncio.sleep(0)
            assert saver.is_saving
            saver.request()
            saver.request()
            saver.request()
            gate.set()
            await saver.flush()
            return calls, max_active, saver

        calls, max_active, saver = asyncio.run(scenario())
        assert calls == 2
        assert max_active == 1
        assert saver.successful_writes == 2
        assert saver.is_saving is False

    def test_retries_until_success(self, caplog):
        async def scenario():
            attempts = []

            async def action():
                attempts.append(1)
                if len(attempts) < 3:
                    raise OSError("gesperrt")

            saver = RetrySaver(action, "Profil", max_retries=5)
            saver.request()
            await saver.flush()
            return attempts, saver

        with caplog.at_level(logging.WARNING):
            attempts, saver = asyncio.run(scenario())
        assert len(attempts) == 3
        assert saver.successful_writes == 1
        assert saver.failed_writes == 0
        assert caplog.text.count("neuer Versuch") == 2

    def test_exhausted_retries_never_raise(self, caplog):
        async def scenario():
            attempts = []

            async def action():
                attempts.append(1)
                raise OSError("kaputt")

            saver = RetrySaver(action, "Tagesplan", max_retries=3)
            saver.request()
            await saver.flush()
            return attempts, saver

        with caplog.at_level(logging.WARNING):
            attempts, saver = asyncio.run(scenario())
        assert len(attempts) == 3
        assert saver.failed_writes == 1
        assert "nach 3 Versuchen fehlgeschlagen" in caplog.text

    def test_flush_without_request(self):
        saver = RetrySaver(lambda: asyncio.sleep(0), "Leer")
        asyncio.run(saver.flush())
        assert saver.successful_writes == 0


# ─── DEBOUNCER ────────────────────────────────────────────────────────────────

class TestDebouncer:
    def test_burst_fires_once(self):
        async def scenario():
            calls = []
            debouncer = Debouncer(lambda: calls.append(1), 0.01)
            for _ in range(5):
                debouncer.trigger()
            assert debouncer.is_pending
            await asyncio.sleep(0.05)
            return calls, debouncer

        calls, debouncer = asyncio.run(scenario())
        assert calls == [1]
        assert debouncer.is_pending is False

    def test_flush_fires_immediately(self):
        async def scenario():
            calls = []
            debouncer = Debouncer(lambda: calls.append(1), 10)
            debouncer.trigger()
            debouncer.flush()
            await asyncio.sleep(0)
            return calls

        assert asyncio.run(scenario()) == [1]

    def test_cancel(self):
        async def scenario():
            calls = []
            debouncer = Debouncer(lambda: calls.append(1), 0.01)
            debouncer.trigger()
            debouncer.cancel()
            await asyncio.sleep(0.03)
            return calls

        assert asyncio.run(scenario()) == []


# ─── PROFIL-STORE ─────────────────────────────────────────────────────────────

class TestProfileStore:
    def test_missing_file_creates_default(self):
        files = MemoryFiles()
        store = ProfileStore(files, PROFILE_PATH)
        profile = asyncio.run(store.load())
        assert profile == Profile()
        assert PROFILE_PATH in files.files
        assert json.loads(files.files[PROFILE_PATH])["enableConfig"]["selected"]["id"] == ""

    def test_broken_file_replaced_with_default(self, caplog):
        files = MemoryFiles({PROFILE_PATH: "{ kein json"})
        store = ProfileStore(files, PROFILE_PATH)
        with caplog.at_level(logging.ERROR):
            profile = asyncio.run(store.load())
        assert profile == Profile()
        assert json.loads(files.files[PROFILE_PATH]) == json.loads(Profile().to_json())
        assert "Standardprofil" in caplog.text

    def test_non_object_json_replaced(self):
        files = MemoryFiles({PROFILE_PATH: "[1, 2, 3]"})
        store = ProfileStore(files, PROFILE_PATH)
        assert asyncio.run(store.load()) == Profile()

    def test_missing_keys_backfilled(self, caplog):
        demo = json.loads(_demo_profile().to_json())
        del demo["timeGroups"]
        demo["enableConfig"] = None
        with caplog.at_level(logging.WARNING):
            profile = parse_profile(json.dumps(demo))
        assert profile.time_groups == {}
        assert profile.enable_config.selected.id == ""
        assert len(profile.curriculums) == 11
        assert "'timeGroups' fehlt" in caplog.text
        assert "'enableConfig' fehlt" in caplog.text

    def test_roundtrip_through_file(self):
        files = MemoryFiles({PROFILE_PATH: _demo_profile().to_json()})
        store = ProfileStore(files, PROFILE_PATH)
        profile = asyncio.run(store.load())
        assert profile == _demo_profile()
        assert files.writes == []

    def test_changes_are_debounced(self):
        async def scenario():
            files = MemoryFiles()
            store = ProfileStore(files, PROFILE_PATH, debounce_seconds=0.01)
            seen = []
            store.add_listener(lambda p: seen.append(p.enable_config.selected.id))
            for name in ("a", "b", "c"):
                store.update(lambda p, n=name: setattr(p.enable_config.selected, "id", n))
            await asyncio.sleep(0.05)
            await store.close()
            return files, seen

        files, seen = asyncio.run(scenario())
        assert seen == ["a", "b", "c"]
        assert files.writes == [PROFILE_PATH]
        assert json.loads(files.files[PROFILE_PATH])["enableConfig"]["selected"]["id"] == "c"

    def test_close_flushes_pending_change(self):
        async def scenario():
            files = MemoryFiles()
            store = ProfileStore(files, PROFILE_PATH, debounce_seconds=60)
            store.replace(_demo_profile())
            await store.close()
            return files

        files = asyncio.run(scenario())
        assert parse_profile(files.files[PROFILE_PATH]) == _demo_profile()

    def test_removed_listener_not_called(self):
        async def scenario():
            store = ProfileStore(MemoryFiles(), PROFILE_PATH, debounce_seconds=0)
            seen = []
            listener = lambda p: seen.append(1)
            store.add_listener(listener)
            store.remove_listener(listener)
            store.notify_changed()
            await store.close()
            return seen

        assert asyncio.run(scenario()) == []

    def test_failed_save_keeps_memory_state(self, caplog):
        async def scenario():
            files = MemoryFiles(fail_writes=10)
            store = ProfileStore(files, PROFILE_PATH, max_retries=2)
            store.profile = _demo_profile()
            await store.save_now()
            return files, store

        with caplog.at_level(logging.ERROR):
            files, store = asyncio.run(scenario())
        assert PROFILE_PATH not in files.files
        assert store.profile == _demo_profile()
        assert "fehlgeschlagen" in caplog.text


# ─── TAGESPLAN-STORE ──────────────────────────────────────────────────────────

def _today_store(files: MemoryFiles, profile: Profile) -> TodayConfigStore:
    profiles = ProfileStore(files, PROFILE_PATH)
    profiles.profile = profile
    return TodayConfigStore(files, TODAY_PATH, profiles, clock=lambda: MONDAY)


class TestTodayConfigStore:
    def test_missing_file_generates_and_saves(self):
        files = MemoryFiles()
        store = _today_store(files, _demo_profile())
        today = asyncio.run(store.load())
        assert today.generate_date == MONDAY
        assert len(today.schedule) == 11   # 7 Stunden, 3 Pausen, 1 Trennlinie
        saved = TodayConfig.model_validate_json(files.files[TODAY_PATH])
        assert saved.schedule.keys() == today.schedule.keys()

    def test_stale_file_regenerated(self, caplog):
        old = TodayConfig(generate_date=MONDAY - timedelta(days=1))
        files = MemoryFiles({TODAY_PATH: old.to_json()})
        store = _today_store(files, _demo_profile())
        with caplog.at_level(logging.INFO):
            today = asyncio.run(store.load())
        assert today.generate_date == MONDAY
        assert len(today.schedule) == 11
        assert files.writes == [TODAY_PATH]
        assert "nicht von heute" in caplog.text

    def test_fresh_file_kept(self):
        fresh = TodayConfig(generate_date=MONDAY.replace(hour=0, minute=1))
        files = MemoryFiles({TODAY_PATH: fresh.to_json()})
        store = _today_store(files, _demo_profile())
        today = asyncio.run(store.load())
        assert today.generate_date == fresh.generate_date
        assert today.schedule == {}
        assert files.writes == []

    def test_missing_fields_regenerated(self, caplog):
        files = MemoryFiles({TODAY_PATH: json.dumps({"schedule": {}})})
        store = _today_store(files, _demo_profile())
        with caplog.at_level(logging.WARNING):
            today = asyncio.run(store.load())
        assert today.generate_date == MONDAY
        assert "fehlende Felder ['generateDate']" in caplog.text

    def test_broken_file_regenerated(self):
        files = MemoryFiles({TODAY_PATH: "nicht json"})
        store = _today_store(files, _demo_profile())
        today = asyncio.run(store.load())
        assert len(today.schedule) == 11

    def test_loop_flag(self, caplog):
        profile = _demo_profile()
        profile.time_groups["woche-b"].layout[0].type = TargetType.TIMEGROUP
        profile.time_groups["woche-b"].layout[0].id = "ab-woche"
        store = _today_store(MemoryFiles(), profile)
        with caplog.at_level(logging.ERROR):
            result = store.regenerate(MONDAY)
        assert store.is_loop is True
        assert result.resolve.visited_ids == ["ab-woche", "woche-b", "ab-woche"]
        assert store.today.schedule == {}
        assert "zyklische Zeitgruppen" in caplog.text

        profile.time_groups["woche-b"].layout[0].type = TargetType.CURRICULUM
        profile.time_groups["woche-b"].layout[0].id = "b-mo"
        store.regenerate(MONDAY)
        assert store.is_loop is False

    def test_loop_flag_survives_reload_on_same_day(self):
        """Zweiter Programmstart am selben Tag: der Zyklus wird weiterhin gemeldet."""
        profile = _demo_profile()
        profile.time_groups["woche-b"].layout[0].type = TargetType.TIMEGROUP
        profile.time_groups["woche-b"].layout[0].id = "ab-woche"
        files = MemoryFiles()

        first = _today_store(files, profile)
        asyncio.run(first.load(MONDAY))
        assert first.is_loop is True
        assert files.writes == [TODAY_PATH]

        second = _today_store(files, profile)
        today = asyncio.run(second.load(MONDAY.replace(hour=10)))
        assert files.writes == [TODAY_PATH]   # Datei übernommen, nicht neu erzeugt
        assert today.generate_date == MONDAY
        assert second.is_loop is True
        assert second.last_result.resolve.visited_ids == ["ab-woche", "woche-b", "ab-woche"]
        assert second.last_result.config is today

    def test_fresh_file_without_loop(self):
        fresh = TodayConfig(generate_date=MONDAY.replace(hour=0, minute=1))
        store = _today_store(MemoryFiles({TODAY_PATH: fresh.to_json()}), _demo_profile())
        asyncio.run(store.load())
        assert store.is_loop is False
        assert store.last_result.resolve.curriculum_id == "b-mo"


# ─── MITTERNACHTS-TIMER ───────────────────────────────────────────────────────

class TestRegenerator:
    def _run(self, clock: FakeClock, stop_after: int, fail_first: bool = False):
        async def scenario():
            calls: list[datetime] = []
            done = asyncio.Event()
            regen = None

            async def on_midnight(now: datetime) -> None:
                calls.append(now)
                if len(calls) == stop_after:
                    regen.cancel()
                    done.set()
                if fail_first and len(calls) == 1:
                    raise RuntimeError("Speicher voll")

            regen = Regenerator(on_midnight, clock=clock, sleep=clock.sleep)
            regen.start()
            assert regen.is_running
            await asyncio.wait_for(done.wait(), timeout=5)
            await asyncio.sleep(0)
            return calls, regen

        return asyncio.run(scenario())

    def test_fires_at_each_midnight(self):
        clock = FakeClock(datetime(2024, 1, 1, 23, 0))
        calls, regen = self._run(clock, stop_after=3)
        assert calls == [datetime(2024, 1, 2), datetime(2024, 1, 3), datetime(2024, 1, 4)]
        assert clock.sleeps[:2] == [3600, 86400]
        assert regen.is_running is False

    def test_early_wakeup_keeps_waiting(self):
        clock = FakeClock(datetime(2024, 1, 1, 23, 0), max_step=1000)
        calls, _ = self._run(clock, stop_after=1)
        assert calls == [datetime(2024, 1, 2)]
        assert clock.sleeps[:4] == [1000, 1000, 1000, 600]

    def test_failing_callback_does_not_stop_timer(self, caplog):
        clock = FakeClock(datetime(2024, 1, 1, 12, 0))
        with caplog.at_level(logging.ERROR):
            calls, regen = self._run(clock, stop_after=2, fail_first=True)
        assert len(calls) == 2
        assert regen.runs == 2
        assert "fehlgeschlagen" in caplog.text

    def test_cancel_is_idempotent(self):
        async def scenario():
            regen = Regenerator(lambda now: asyncio.sleep(0), sleep=_sleep_forever)
            regen.cancel()
            regen.start()
            regen.cancel()
            regen.cancel()
            return regen

        assert asyncio.run(scenario()).is_running is False


# ─── KONTEXT ──────────────────────────────────────────────────────────────────

class TestScheduleContext:
    def test_init_change_teardown(self):
        async def scenario():
            config = default_app_config()
            files = MemoryFiles()
            ctx = ScheduleContext(config, files=files, clock=lambda: MONDAY, sleep=_sleep_forever)
            await ctx.on_load()
            assert ctx.initialized
            assert ctx.regenerator.is_running
            assert ctx.today.today.schedule == {}   # leeres Standardprofil

            ctx.profiles.replace(_demo_profile())
            assert len(ctx.today.today.schedule) == 11

            await ctx.on_unload()
            return ctx, files

        ctx, files = asyncio.run(scenario())
        config = default_app_config()
        assert ctx.initialized is False
        assert ctx.regenerator.is_running is False
        assert parse_profile(files.files[config.storage.profile_file]) == _demo_profile()
        saved = TodayConfig.model_validate_json(files.files[config.storage.today_file])
        assert len(saved.schedule) == 11

    def test_init_twice_is_noop(self):
        async def scenario():
            files = MemoryFiles()
            ctx = ScheduleContext(default_app_config(), files=files,
                                  clock=lambda: MONDAY, sleep=_sleep_forever)
            await ctx.init()
            writes = len(files.writes)
            await ctx.init()
            assert len(files.writes) == writes
            await ctx.teardown()
            await ctx.teardown()

        asyncio.run(scenario())

    def test_midnight_regenerates_and_saves(self):
        async def scenario():
            files = MemoryFiles({PROFILE_PATH: _demo_profile().to_json()})
            config = default_app_config()
            config.storage.profile_file = PROFILE_PATH
            clock = FakeClock(datetime(2024, 1, 7, 23, 30))   # Sonntag
            ctx = ScheduleContext(config, files=files, clock=clock, sleep=_sleep_forever)
            await ctx.init()
            assert ctx.today.today.schedule == {}            # Wochenende
            clock.now = datetime(2024, 1, 8, 0, 0)
            await ctx._on_midnight(clock.now)
            schedule = ctx.today.today.schedule
            await ctx.teardown()
            return schedule, files, config

        schedule, files, config = asyncio.run(scenario())
        assert len(schedule) == 11
        saved = TodayConfig.model_validate_json(files.files[config.storage.today_file])
        assert saved.generate_date == datetime(2024, 1, 8)


# ─── LOKALE DATEIEN ───────────────────────────────────────────────────────────

class TestLocalFileAccess:
    def test_write_creates_directories(self, tmp_path: Path):
        files = LocalFileAccess(tmp_path)

        async def scenario():
            assert await files.exists("a/b/c.json") is False
            await files.write_file("a/b/c.json", '{"x": 1}')
            return await files.exists("a/b/c.json"), await files.read_file("a/b/c.json")

        exists, text = asyncio.run(scenario())
        assert exists is True
        assert text == '{"x": 1}'
        assert (tmp_path / "a" / "b" / "c.json").exists()

    def test_read_missing_raises_oserror(self, tmp_path: Path):
        files = LocalFileAccess(tmp_path)
        with pytest.raises(OSError):
            asyncio.run(files.read_file("fehlt.json"))
