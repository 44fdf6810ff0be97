"""
Tests for the SSE frame decoder.

Covers buffering across arbitrary read boundaries, control frame filtering,
the done terminator and the malformed-frame tolerance policy.
"""

from __future__ import annotations

import pytest

from openclaw_bridge import EngineEvent, SseFrameDecoder, decode_sse_stream
from tests.utils import byte_stream, sse_frame, split_at


FRAMES = [
    sse_frame("task:created", {"task": {"title": "Research"}}),
    sse_frame("agent:thinking", {"agentId": "researcher", "text": "Looking…"}),
    sse_frame("agent:response", {"output": "Hello"}),
    sse_frame("goal:completed", {"tasks": 2, "completed": 2, "failed": 0}),
]
EXPECTED = [
    EngineEvent("task:created", {"task": {"title": "Research"}}),
    EngineEvent("agent:thinking", {"agentId": "researcher", "text": "Looking…"}),
    EngineEvent("agent:response", {"output": "Hello"}),
    EngineEvent("goal:completed", {"tasks": 2, "completed": 2, "failed": 0}),
]


async def collect(pieces: list[bytes]) -> list[EngineEvent]:
    return [event async for event in decode_sse_stream(byte_stream(pieces))]


class TestSseFrameDecoderFeed:
    """Tests for the incremental decoder."""

    def test_complete_frame_is_decoded(self) -> None:
        # given
        decoder = SseFrameDecoder()

        # when
        events = decoder.feed(sse_frame("agent:response", {"output": "Hi"}).encode())

        # then
        assert events == [EngineEvent("agent:response", {"output": "Hi"})]
        assert decoder.pending == ""

    def test_incomplete_frame_is_retained_until_separator(self) -> None:
        # given
        decoder = SseFrameDecoder()

        # when
        first = decoder.feed(b'event: agent:response\ndata: {"output": "Hi"}\n')
        second = decoder.feed(b"\n")

        # then
        assert first == []
        assert second == [EngineEvent("agent:response", {"output": "Hi"})]

    def test_trailing_partial_json_is_not_parsed(self) -> None:
        # given
        decoder = SseFrameDecoder()

        # when
        events = decoder.feed(b'event: agent:response\ndata: {"outp')

        # then
        assert events == []
        assert decoder.pending == 'event: agent:response\ndata: {"outp'

    def test_missing_event_line_defaults_to_message(self) -> None:
        decoder = SseFrameDecoder()

        events = decoder.feed(sse_frame(None, {"x": 1}).encode())

        assert events == [EngineEvent("message", {"x": 1})]

    def test_missing_data_line_defaults_to_empty_payload(self) -> None:
        decoder = SseFrameDecoder()

        events = decoder.feed(b"event: loop:tick\n\n")

        assert events == [EngineEvent("loop:tick", {})]

    def test_event_name_is_stripped(self) -> None:
        decoder = SseFrameDecoder()

        events = decoder.feed(b'event: agent:response  \ndata: {"output": "x"}\n\n')

        assert events[0].name == "agent:response"

    def test_blank_frames_are_skipped(self) -> None:
        decoder = SseFrameDecoder()

        events = decoder.feed(b"\n\n  \n\n" + sse_frame("loop:tick", {}).encode())

        assert events == [EngineEvent("loop:tick", {})]

    def test_multibyte_character_split_across_reads(self) -> None:
        # given
        decoder = SseFrameDecoder()
        raw = 'event: agent:response\ndata: {"output": "日本語"}\n\n'.encode()
        split = raw.index("本".encode()) + 1

        # when
        first = decoder.feed(raw[:split])
        second = decoder.feed(raw[split:])

        # then
        assert first == []
        assert second == [EngineEvent("agent:response", {"output": "日本語"})]

    def test_str_input_is_accepted(self) -> None:
        decoder = SseFrameDecoder()

        events = decoder.feed(sse_frame("agent:response", {"output": "Hi"}))

        assert events == [EngineEvent("agent:response", {"output": "Hi"})]


class TestControlFrames:
    """heartbeat / connected / done handling."""

    @pytest.mark.parametrize("control", ["heartbeat", "connected"])
    def test_control_frames_are_filtered(self, control: str) -> None:
        # given
        decoder = SseFrameDecoder()
        stream = (
            sse_frame(control, {"ts": 1})
            + sse_frame("agent:response", {"output": "a"})
            + sse_frame(control, {})
        )

        # when
        events = decoder.feed(stream.encode())

        # then
        assert [event.name for event in events] == ["agent:response"]

    def test_done_frame_stops_decoding_in_same_read(self) -> None:
        # given
        decoder = SseFrameDecoder()
        stream = (
            sse_frame("agent:response", {"output": "a"})
            + sse_frame("done", {})
            + sse_frame("agent:response", {"output": "after"})
        )

        # when
        events = decoder.feed(stream.encode())

        # then
        assert events == [EngineEvent("agent:response", {"output": "a"})]
        assert decoder.done is True
        assert decoder.pending == ""

    def test_feed_after_done_returns_nothing(self) -> None:
        decoder = SseFrameDecoder()
        decoder.feed(sse_frame("done", {}).encode())

        events = decoder.feed(sse_frame("agent:response", {"output": "late"}).encode())

        assert events == []

    def test_done_with_malformed_data_still_terminates(self) -> None:
        decoder = SseFrameDecoder()

        decoder.feed(sse_frame("done", raw_data="not json").encode())

        assert decoder.done is True


class TestMalformedFrames:
    """Frames with unusable data are dropped without raising."""

    def test_invalid_json_is_dropped_and_neighbors_survive(self) -> None:
        # given
        decoder = SseFrameDecoder()
        stream = (
            sse_frame("agent:response", {"output": "before"})
            + sse_frame("agent:thinking", raw_data="{not json}")
            + sse_frame("agent:response", {"output": "after"})
        )

        # when
        events = decoder.feed(stream.encode())

        # then
        assert events == [
            EngineEvent("agent:response", {"output": "before"}),
            EngineEvent("agent:response", {"output": "after"}),
        ]

    @pytest.mark.parametrize("raw_data", ["[1, 2]", '"text"', "42", "null"])
    def test_non_object_json_is_dropped(self, raw_data: str) -> None:
        decoder = SseFrameDecoder()

        events = decoder.feed(sse_frame("agent:response", raw_data=raw_data).encode())

        assert events == []


class TestDecodeSseStream:
    """Tests for the async stream driver."""

    @pytest.mark.asyncio
    async def test_one_piece(self) -> None:
        events = await collect(["".join(FRAMES).encode()])

        assert events == EXPECTED

    @pytest.mark.asyncio
    async def test_byte_at_a_time(self) -> None:
        # given
        raw = "".join(FRAMES).encode()

        # when
        events = await collect([raw[i : i + 1] for i in range(len(raw))])

        # then
        assert events == EXPECTED

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "offsets",
        [
            [1],
            [5, 6, 7],
            [20, 21, 60, 61, 62],
            [13, 47, 101, 150, 151],
        ],
    )
    async def test_arbitrary_split_points(self, offsets: list[int]) -> None:
        # given
        raw = "".join(FRAMES).encode()

        # when
        events = await collect(split_at(raw, offsets))

        # then
        assert events == EXPECTED

    @pytest.mark.asyncio
    async def test_split_inside_separator(self) -> None:
        # given
        raw = "".join(FRAMES).encode()
        first_separator = raw.index(b"\n\n")

        # when
        events = await collect(split_at(raw, [first_separator + 1]))

        # then
        assert events == EXPECTED

    @pytest.mark.asyncio
    async def test_done_ends_stream_and_ignores_remaining_reads(self) -> None:
        # given
        pieces = [
            sse_frame("agent:response", {"output": "a"}).encode(),
            sse_frame("done", {}).encode() + b"event: agent:resp",
            b'onse\ndata: {"output": "late"}\n\n',
        ]

        # when
        events = await collect(pieces)

        # then
        assert events == [EngineEvent("agent:response", {"output": "a"})]

    @pytest.mark.asyncio
    async def test_unterminated_tail_at_end_of_stream_is_discarded(self) -> None:
        # given
        pieces = [
            sse_frame("agent:response", {"output": "a"}).encode(),
            b'event: agent:response\ndata: {"output": "b"}',
        ]

        # when
        events = await collect(pieces)

        # then
        assert events == [EngineEvent("agent:response", {"output": "a"})]

    @pytest.mark.asyncio
    async def test_transport_error_propagates_after_decoded_events(self) -> None:
        # given
        pieces = [sse_frame("agent:response", {"output": "a"}).encode()]
        received: list[EngineEvent] = []

        # when / then
        with pytest.raises(ConnectionResetError):
            async for event in decode_sse_stream(byte_stream(pieces, ConnectionResetError("reset"))):
                received.append(event)
        assert received == [EngineEvent("agent:response", {"output": "a"})]

    @pytest.mark.asyncio
    async def test_no_frame_emitted_twice(self) -> None:
        # given
        raw = "".join(FRAMES * 3).encode()

        # when
        events = await collect(split_at(raw, range(0, len(raw), 7)))

        # then
        assert events == EXPECTED * 3
