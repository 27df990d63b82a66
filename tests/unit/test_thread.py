"""Unit tests for email thread classification."""

from __future__ import annotations

import asyncio

import pytest
from conftest import FakeGmail, make_message

from interaction_stats.models.thread import EmailThread, FetchState


def _internal(message_id: str) -> dict:
    return make_message("v@h.com", "u@h.com", message_id=message_id)


class TestEmailThread:
    """Test suite for EmailThread."""

    @pytest.mark.asyncio
    async def test_all_messages_qualify(self, settings) -> None:
        source = FakeGmail(threads={"t1": [_internal("m1"), _internal("m2"), _internal("m3")]})
        thread = EmailThread({"id": "t1"}, settings, source)

        messages = await thread.get_messages()

        assert [m.id for m in messages] == ["m1", "m2", "m3"]
        assert thread.should_include() is True

    @pytest.mark.asyncio
    async def test_one_external_message_excludes_thread(self, settings) -> None:
        external = make_message("v@h.com", "x@other.com", message_id="m2")
        source = FakeGmail(threads={"t1": [_internal("m1"), external, _internal("m3")]})
        thread = EmailThread({"id": "t1"}, settings, source)

        await thread.get_messages()

        assert thread.should_include() is False

    @pytest.mark.asyncio
    async def test_get_messages_fetches_once(self, settings) -> None:
        source = FakeGmail(threads={"t1": [_internal("m1")]})
        thread = EmailThread({"id": "t1"}, settings, source)

        first = await thread.get_messages()
        second = await thread.get_messages()

        assert source.get_calls == ["t1"]
        assert first is second

    @pytest.mark.asyncio
    async def test_concurrent_get_messages_fetches_once(self, settings) -> None:
        source = FakeGmail(threads={"t1": [_internal("m1")]})
        thread = EmailThread({"id": "t1"}, settings, source)

        results = await asyncio.gather(*(thread.get_messages() for _ in range(5)))

        assert source.get_calls == ["t1"]
        assert all(r is results[0] for r in results)
        assert thread.state is FetchState.FETCHED

    def test_unfetched_thread_is_excluded(self, settings) -> None:
        thread = EmailThread({"id": "t1"}, settings, FakeGmail())

        assert thread.state is FetchState.UNFETCHED
        assert thread.should_include() is False
        assert thread.to_rows() == []

    @pytest.mark.asyncio
    async def test_empty_thread_is_excluded(self, settings) -> None:
        thread = EmailThread({"id": "t1"}, settings, FakeGmail())

        assert await thread.get_messages() == []
        assert thread.state is FetchState.FETCHED
        assert thread.should_include() is False

    @pytest.mark.asyncio
    async def test_failed_fetch_can_be_retried(self, settings) -> None:
        class FlakySource:
            calls = 0

            async def get_thread(self, thread_id: str) -> dict:
                FlakySource.calls += 1
                if FlakySource.calls == 1:
                    raise RuntimeError("boom")
                return {"messages": [_internal("m1")]}

        thread = EmailThread({"id": "t1"}, settings, FlakySource())

        with pytest.raises(RuntimeError):
            await thread.get_messages()
        assert thread.state is FetchState.UNFETCHED

        assert len(await thread.get_messages()) == 1

    @pytest.mark.asyncio
    async def test_to_rows_in_message_order(self, settings) -> None:
        source = FakeGmail(
            threads={
                "t1": [
                    make_message("v@h.com", "u@h.com", subject="first", message_id="m1"),
                    make_message("u@h.com", "v@h.com", subject="Re: first", message_id="m2"),
                ]
            }
        )
        thread = EmailThread({"id": "t1"}, settings, source)
        await thread.get_messages()

        rows = thread.to_rows()

        assert [r.subject for r in rows] == ["first", "Re: first"]
        assert [r.is_sender for r in rows] == [False, True]
