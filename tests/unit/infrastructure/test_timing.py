import asyncio
import logging

from utils.timing import time_it

def test_time_it_sync(caplog):
    @time_it("unit_sync")
    def add(a, b):
        return a + b

    with caplog.at_level(logging.INFO, logger="unit_sync"):
        assert add(1, 2) == 3
    assert any(r.getMessage().startswith("Finished unit_sync in ") for r in caplog.records)

def test_time_it_async(caplog):
    @time_it("unit_async")
    async def double(value):
        return value * 2

    with caplog.at_level(logging.INFO, logger="unit_async"):
        assert asyncio.run(double(4)) == 8
    assert any(r.getMessage().startswith("Finished unit_async in ") for r in caplog.records)

def test_time_it_logs_on_error(caplog):
    @time_it("unit_error")
    def broken():
        raise ValueError("boom")

    with caplog.at_level(logging.INFO, logger="unit_error"):
        try:
            broken()
        except ValueError:
            pass
    assert any("Finished unit_error" in r.getMessage() for r in caplog.records)
