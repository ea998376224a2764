"""Tests for ObservableValue."""

from __future__ import annotations

from rconweb.console.observable import ObservableValue


class TestObservableValue:
    def test_subscriber_gets_current_value_immediately(self) -> None:
        value = ObservableValue(3)
        seen: list[int] = []
        value.subscribe(seen.append)
        assert seen == [3]

    def test_subscriber_gets_every_later_value(self) -> None:
        value = ObservableValue(0)
        seen: list[int] = []
        value.subscribe(seen.append)
        value.set(1)
        value.set(1)
        value.set(2)
        assert seen == [0, 1, 1, 2]
        assert value.value == 2

    def test_distinct_skips_repeated_values(self) -> None:
        value = ObservableValue(False, distinct=True)
        seen: list[bool] = []
        value.subscribe(seen.append)
        value.set(False)
        value.set(True)
        value.set(True)
        assert seen == [False, True]

    def test_unsubscribe_stops_notifications(self) -> None:
        value = ObservableValue("a")
        seen: list[str] = []
        unsubscribe = value.subscribe(seen.append)
        unsubscribe()
        unsubscribe()
        value.set("b")
        assert seen == ["a"]
        assert value.subscriber_count == 0

    def test_failing_subscriber_does_not_block_others(self) -> None:
        value = ObservableValue(0)
        seen: list[int] = []

        def broken(_: int) -> None:
            if value.value:
                raise RuntimeError("boom")

        value.subscribe(broken)
        value.subscribe(seen.append)
        value.set(5)
        assert seen == [0, 5]
