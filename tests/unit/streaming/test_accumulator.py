import asyncio
from types import SimpleNamespace

import pytest

from code_kit.errors import StreamError
from code_kit.streaming.accumulator import AccumulatedResult, StreamAccumulator
from code_kit.streaming.fragments import (
    AgentResultSignal,
    agent_message_text,
    anthropic_text_delta,
    is_message_stop,
)


def text_delta(text: str) -> SimpleNamespace:
    return SimpleNamespace(
        type="content_block_delta", delta=SimpleNamespace(type="text_delta", text=text)
    )


class TestConsume:
    @pytest.mark.asyncio
    async def test_concatenates_in_order(self, fake_stream) -> None:
        seen: list[str] = []
        accumulator = StreamAccumulator(observers=[seen.append])

        result = await accumulator.consume(fake_stream(["ab", "cd", "ef"]))

        assert result == AccumulatedResult(
            text="abcdef", char_count=6, fragment_count=3, completed=False
        )
        assert seen == ["ab", "cd", "ef"]

    @pytest.mark.asyncio
    async def test_every_observer_receives_every_fragment(
        self, fake_stream
    ) -> None:
        first: list[str] = []
        second: list[str] = []
        accumulator = StreamAccumulator(observers=[first.append])
        accumulator.add_observer(second.append)

        await accumulator.consume(fake_stream(["ab", "cd", "ef"]))

        assert first == second == ["ab", "cd", "ef"]

    @pytest.mark.asyncio
    async def test_observer_runs_before_next_fragment_is_requested(
        self, fake_stream
    ) -> None:
        log: list[str] = []
        accumulator = StreamAccumulator(
            observers=[lambda text: log.append(f"observe:{text}")]
        )

        await accumulator.consume(fake_stream(["a", "b"], log=log))

        assert log == ["produce:a", "observe:a", "produce:b", "observe:b"]

    @pytest.mark.asyncio
    async def test_buffer_is_prefix_at_every_observation(self, fake_stream) -> None:
        accumulator = StreamAccumulator()
        snapshots: list[str] = []
        accumulator.add_observer(lambda _: snapshots.append(accumulator.text))

        await accumulator.consume(fake_stream(["ab", "cd", "ef"]))

        assert snapshots == ["ab", "abcd", "abcdef"]

    @pytest.mark.asyncio
    async def test_empty_stream(self, fake_stream) -> None:
        stream = fake_stream([])

        result = await StreamAccumulator().consume(stream)

        assert result.text == ""
        assert result.char_count == 0
        assert stream.closed

    @pytest.mark.asyncio
    async def test_closes_source_on_natural_end(self, fake_stream) -> None:
        stream = fake_stream(["ab"])

        await StreamAccumulator().consume(stream)

        assert stream.closed

    @pytest.mark.asyncio
    async def test_single_use(self, fake_stream) -> None:
        accumulator = StreamAccumulator()
        await accumulator.consume(fake_stream(["ab"]))

        with pytest.raises(RuntimeError, match="single-use"):
            await accumulator.consume(fake_stream(["cd"]))


class TestClassification:
    @pytest.mark.asyncio
    async def test_skips_non_text_events(self, fake_stream) -> None:
        seen: list[str] = []
        accumulator = StreamAccumulator(anthropic_text_delta, observers=[seen.append])
        events = [
            SimpleNamespace(type="message_start"),
            text_delta("Hel"),
            SimpleNamespace(
                type="content_block_delta",
                delta=SimpleNamespace(type="input_json_delta", partial_json="{}"),
            ),
            text_delta("lo"),
        ]

        result = await accumulator.consume(fake_stream(events))

        assert result.text == "Hello"
        assert result.fragment_count == 2
        assert seen == ["Hel", "lo"]

    @pytest.mark.asyncio
    async def test_stops_at_completion_signal(self, fake_stream) -> None:
        stream = fake_stream(
            [text_delta("done"), SimpleNamespace(type="message_stop"), text_delta("!")]
        )
        accumulator = StreamAccumulator(
            anthropic_text_delta, is_complete=is_message_stop
        )

        result = await accumulator.consume(stream)

        assert result.text == "done"
        assert result.completed is True
        assert stream.closed

    @pytest.mark.asyncio
    async def test_agent_stream_ends_at_result_after_text(self, fake_stream) -> None:
        def assistant(block: SimpleNamespace) -> SimpleNamespace:
            return SimpleNamespace(
                type="assistant", message=SimpleNamespace(content=[block])
            )

        result_message = SimpleNamespace(type="result", subtype="success")
        stream = fake_stream(
            [
                SimpleNamespace(type="system", subtype="init"),
                result_message,
                assistant(SimpleNamespace(type="text", text="Sure.")),
                assistant(
                    SimpleNamespace(type="tool_use", input={"content": "def f(): ..."})
                ),
                result_message,
                assistant(SimpleNamespace(type="text", text="late")),
            ]
        )
        accumulator = StreamAccumulator(
            agent_message_text, is_complete=AgentResultSignal()
        )

        result = await accumulator.consume(stream)

        assert result.text == "Sure.\ndef f(): ...\n"
        assert result.completed is True
        assert stream.closed


class TestFailure:
    @pytest.mark.asyncio
    async def test_error_keeps_partial_buffer(self, fake_stream) -> None:
        stream = fake_stream(["ab", "cd"], error=ConnectionError("reset"))
        accumulator = StreamAccumulator()

        with pytest.raises(StreamError) as exc_info:
            await accumulator.consume(stream)

        assert exc_info.value.partial_text == "abcd"
        assert isinstance(exc_info.value.__cause__, ConnectionError)
        assert accumulator.text == "abcd"
        assert stream.closed

    @pytest.mark.asyncio
    async def test_early_break_closes_source(self, fake_stream) -> None:
        stream = fake_stream(["ab", "cd", "ef"])
        accumulator = StreamAccumulator()

        async with accumulator.open(stream) as fragments:
            async for fragment in fragments:
                assert fragment == "ab"
                break

        assert stream.closed
        assert accumulator.text == "ab"

    @pytest.mark.asyncio
    async def test_exit_before_iterating_closes_source(self, fake_stream) -> None:
        stream = fake_stream(["ab"])

        async with StreamAccumulator().open(stream):
            pass

        assert stream.closed

    @pytest.mark.asyncio
    async def test_error_in_caller_block_closes_source(self, fake_stream) -> None:
        stream = fake_stream(["ab", "cd"])
        seen: list[str] = []

        with pytest.raises(KeyError):
            async with StreamAccumulator(observers=[seen.append]).open(
                stream
            ) as fragments:
                async for _ in fragments:
                    raise KeyError("stop")

        assert stream.closed
        assert seen == ["ab"]

    @pytest.mark.asyncio
    async def test_cancellation_closes_source_and_silences_observers(
        self, fake_stream
    ) -> None:
        stream = fake_stream(["ab"], hang=True)
        seen: list[str] = []
        task = asyncio.create_task(
            StreamAccumulator(observers=[seen.append]).consume(stream)
        )
        while not seen:
            await asyncio.sleep(0)

        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task
        assert stream.closed
        assert seen == ["ab"]


@pytest.mark.asyncio
async def test_open_is_single_use(fake_stream) -> None:
    accumulator = StreamAccumulator()
    async with accumulator.open(fake_stream(["ab"])):
        pass

    with pytest.raises(RuntimeError, match="single-use"):
        async with accumulator.open(fake_stream(["cd"])):
            pass
