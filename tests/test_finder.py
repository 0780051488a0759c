"""Tests for BrowserFinder: fast path, cached scan, and end-to-end ranking."""

import asyncio

import pytest

from conftest import FakeAccess, FakeRunner

FIREFOX_EXE = "/Applications/Firefox.app/Contents/MacOS/firefox"
NIGHTLY_VOLUME_EXE = "/Volumes/Disk/Firefox Nightly.app/Contents/MacOS/firefox"


def _finder(runner, access, home="/Users/me", preferred_path=None):
    from browser_finder.darwin import FIREFOX, DarwinVariant
    from browser_finder.finder import BrowserFinder

    variant = DarwinVariant(FIREFOX, home=home, preferred_path=preferred_path, run=runner, access=access)
    return BrowserFinder(variant, access=access)


class TestSingleFlight:
    @pytest.mark.asyncio
    async def test_runs_once_for_sequential_calls(self):
        from browser_finder.finder import SingleFlight

        calls = []

        async def compute():
            calls.append(1)
            return "result"

        once = SingleFlight(compute)

        assert await once.get() == "result"
        assert await once.get() == "result"
        assert len(calls) == 1
        assert once.done

    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_run(self):
        from browser_finder.finder import SingleFlight

        calls = []
        release = asyncio.Event()

        async def compute():
            calls.append(1)
            await release.wait()
            return 42

        once = SingleFlight(compute)
        waiters = [asyncio.ensure_future(once.get()) for _ in range(5)]
        await asyncio.sleep(0)
        release.set()

        assert await asyncio.gather(*waiters) == [42] * 5
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_failure_is_not_cached(self):
        from browser_finder.finder import SingleFlight

        attempts = []

        async def compute():
            attempts.append(1)
            if len(attempts) == 1:
                raise RuntimeError("boom")
            return "ok"

        once = SingleFlight(compute)

        with pytest.raises(RuntimeError):
            await once.get()
        assert not once.done
        assert await once.get() == "ok"
        assert len(attempts) == 2

    @pytest.mark.asyncio
    async def test_cancelled_caller_does_not_cancel_run(self):
        from browser_finder.finder import SingleFlight

        release = asyncio.Event()

        async def compute():
            await release.wait()
            return "done"

        once = SingleFlight(compute)
        first = asyncio.ensure_future(once.get())
        await asyncio.sleep(0)
        first.cancel()
        await asyncio.sleep(0)
        release.set()

        assert await once.get() == "done"


class TestFindAll:
    @pytest.mark.asyncio
    async def test_scans_once_across_calls(self, runner, access):
        finder = _finder(runner, access)

        for _ in range(3):
            await finder.find_all()

        assert runner.calls == 1

    @pytest.mark.asyncio
    async def test_concurrent_calls_scan_once(self, runner, access):
        runner.stdout = "/Applications/Firefox.app\n"
        runner.release = asyncio.Event()
        access.accessible = {FIREFOX_EXE}
        finder = _finder(runner, access)

        pending = [asyncio.ensure_future(finder.find_all()) for _ in range(4)]
        await asyncio.sleep(0)
        runner.release.set()
        results = await asyncio.gather(*pending)

        assert runner.calls == 1
        assert all([e.path for e in r] == [FIREFOX_EXE] for r in results)

    @pytest.mark.asyncio
    async def test_end_to_end_ranking(self, runner, access):
        """Registry output with a disambiguated path and a mounted volume copy."""
        from browser_finder.models import Executable, Quality

        runner.stdout = "/Applications/Firefox.app (0x1a2b3c)\n/Volumes/Disk/Firefox Nightly.app\n"
        access.accessible = {FIREFOX_EXE, NIGHTLY_VOLUME_EXE}
        finder = _finder(runner, access)

        result = await finder.find_all()

        assert result == [
            Executable(FIREFOX_EXE, Quality.STABLE),
            Executable(NIGHTLY_VOLUME_EXE, Quality.CANARY),
        ]

    @pytest.mark.asyncio
    async def test_location_precedence(self, runner, access):
        user_exe = "/Users/me/Applications/Firefox.app/Contents/MacOS/firefox"
        volume_exe = "/Volumes/Disk/Firefox.app/Contents/MacOS/firefox"
        runner.stdout = "/Volumes/Disk/Firefox.app\n/Users/me/Applications/Firefox.app\n"
        access.accessible = {FIREFOX_EXE, user_exe, volume_exe}
        finder = _finder(runner, access)

        result = await finder.find_all()

        assert [e.path for e in result] == [FIREFOX_EXE, user_exe, volume_exe]

    @pytest.mark.asyncio
    async def test_preferred_path_ranked_first(self, runner, access):
        from browser_finder.models import Quality

        preferred_exe = "/Volumes/Disk/Firefox.app/Contents/MacOS/firefox"
        access.accessible = {FIREFOX_EXE, preferred_exe}
        finder = _finder(runner, access, preferred_path="/Volumes/Disk/Firefox.app")

        result = await finder.find_all()

        assert result[0].path == preferred_exe
        assert result[0].quality is Quality.CUSTOM
        assert result[1].path == FIREFOX_EXE

    @pytest.mark.asyncio
    async def test_nothing_installed_returns_empty_list(self, runner, access):
        finder = _finder(runner, access)

        assert await finder.find_all() == []

    @pytest.mark.asyncio
    async def test_scan_failure_propagates_and_retries(self, access):
        from browser_finder.system import CommandError

        runner = FakeRunner(error=CommandError("lsregister -dump", returncode=1))
        access.accessible = {FIREFOX_EXE}
        finder = _finder(runner, access)

        with pytest.raises(CommandError):
            await finder.find_all()

        runner.error = None
        result = await finder.find_all()

        assert [e.path for e in result] == [FIREFOX_EXE]
        assert runner.calls == 2

    @pytest.mark.asyncio
    async def test_returned_list_is_a_copy(self, runner, access):
        access.accessible = {FIREFOX_EXE}
        finder = _finder(runner, access)

        (await finder.find_all()).clear()

        assert len(await finder.find_all()) == 1


class TestFindWhere:
    @pytest.mark.asyncio
    async def test_well_known_path_skips_scan(self, runner):
        from browser_finder.models import Quality

        access = FakeAccess([FIREFOX_EXE])
        finder = _finder(runner, access)

        result = await finder.find_where(lambda exe: exe.quality is Quality.STABLE)

        assert result.path == FIREFOX_EXE
        assert runner.calls == 0
        assert access.checked == [FIREFOX_EXE]

    @pytest.mark.asyncio
    async def test_well_known_paths_checked_in_order_until_match(self, runner):
        dev_exe = "/Applications/Firefox Developer Edition.app/Contents/MacOS/firefox"
        access = FakeAccess([dev_exe])
        finder = _finder(runner, access)

        result = await finder.find_where(lambda exe: True)

        assert result.path == dev_exe
        assert access.checked == [FIREFOX_EXE, dev_exe]
        assert runner.calls == 0

    @pytest.mark.asyncio
    async def test_predicate_checked_before_access(self, runner, access):
        """Well-known paths failing the predicate are never touched on disk."""
        from browser_finder.models import Quality

        finder = _finder(runner, access)

        await finder.find_where(lambda exe: exe.quality is Quality.CUSTOM)

        # Only the scan's default-path candidate is checked
        assert access.checked == [FIREFOX_EXE]
        assert runner.calls == 1

    @pytest.mark.asyncio
    async def test_falls_back_to_scan(self, runner, access):
        from browser_finder.models import Quality

        runner.stdout = "/Volumes/Disk/Firefox Nightly.app\n"
        access.accessible = {NIGHTLY_VOLUME_EXE}
        finder = _finder(runner, access)

        result = await finder.find_where(lambda exe: exe.quality is Quality.CANARY)

        assert result.path == NIGHTLY_VOLUME_EXE
        assert runner.calls == 1

    @pytest.mark.asyncio
    async def test_returns_none_when_not_installed(self, runner, access):
        finder = _finder(runner, access)

        assert await finder.find_where(lambda exe: True) is None

    @pytest.mark.asyncio
    async def test_find_by_quality(self, runner):
        from browser_finder.models import Quality

        nightly_exe = "/Applications/Firefox Nightly.app/Contents/MacOS/firefox"
        access = FakeAccess([FIREFOX_EXE, nightly_exe])
        finder = _finder(runner, access)

        result = await finder.find_by_quality(Quality.CANARY)

        assert result.path == nightly_exe
        assert runner.calls == 0

    @pytest.mark.asyncio
    async def test_scan_failure_propagates(self, access):
        from browser_finder.system import CommandError

        runner = FakeRunner(error=CommandError("lsregister -dump", returncode=1))
        finder = _finder(runner, access)

        with pytest.raises(CommandError):
            await finder.find_where(lambda exe: True)
