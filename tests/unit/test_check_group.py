"""Unit tests for concurrent check groups."""

import asyncio

import pytest

from node_deposit.services.deposit.check_group import gather_checks


async def _value(value, delay=0.0):
    await asyncio.sleep(delay)
    return value


async def _fail(error, delay=0.0):
    await asyncio.sleep(delay)
    raise error


class TestGatherChecks:
    """Tests for gather_checks."""

    @pytest.mark.asyncio
    async def test_empty_group(self):
        """An empty group returns an empty mapping."""
        assert await gather_checks({}) == {}

    @pytest.mark.asyncio
    async def test_results_by_name(self):
        """Every check result is returned under its name."""
        results = await gather_checks({
            "balance": _value(10, delay=0.01),
            "enabled": _value(True),
        })

        assert results == {"balance": 10, "enabled": True}

    @pytest.mark.asyncio
    async def test_checks_run_concurrently(self):
        """Checks are started together, not one after another."""
        started = []

        async def record(name):
            started.append(name)
            await asyncio.sleep(0.05)
            return name

        loop = asyncio.get_running_loop()
        begin = loop.time()
        await gather_checks({"a": record("a"), "b": record("b"), "c": record("c")})

        assert sorted(started) == ["a", "b", "c"]
        assert loop.time() - begin < 0.15

    @pytest.mark.asyncio
    async def test_first_error_raised(self):
        """Any failing check fails the whole group."""
        with pytest.raises(ConnectionError, match="rpc down"):
            await gather_checks({
                "balance": _value(10),
                "limit": _fail(ConnectionError("rpc down")),
            })

    @pytest.mark.asyncio
    async def test_other_checks_finish_before_raising(self):
        """In-flight checks are not cancelled when one fails."""
        finished = asyncio.Event()

        async def slow():
            await asyncio.sleep(0.02)
            finished.set()
            return True

        with pytest.raises(ValueError):
            await gather_checks({"slow": slow(), "bad": _fail(ValueError("bad"))})

        assert finished.is_set()

    @pytest.mark.asyncio
    async def test_earliest_failure_wins(self):
        """The error of the check that failed first is raised."""
        with pytest.raises(KeyError):
            await gather_checks({
                "late": _fail(TimeoutError(), delay=0.05),
                "early": _fail(KeyError("early")),
            })
