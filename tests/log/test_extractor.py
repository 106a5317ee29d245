import asyncio
import unittest

from gitstat.log.extractor import SCISSOR, extract_chunks, split_stream


async def pieces(*items):
    for item in items:
        await asyncio.sleep(0)
        yield item


async def collect(aiter):
    return [item async for item in aiter]


class TestSplitStream(unittest.IsolatedAsyncioTestCase):
    """Tests for the separator-based stream splitter."""

    async def test_splits_on_separator(self) -> None:
        result = await collect(split_stream(pieces("a|b|c"), "|"))
        self.assertEqual(result, ["a", "b", "c"])

    async def test_separator_across_pieces(self) -> None:
        result = await collect(split_stream(pieces("one--", "8<--two-", "-8<--three"), "--8<--"))
        self.assertEqual(result, ["one", "two", "three"])

    async def test_separator_split_one_character_per_piece(self) -> None:
        text = "".join(f"record {i}--8<--" for i in range(200)) + "tail"
        result = await collect(split_stream(pieces(*text), "--8<--"))
        self.assertEqual(result, [f"record {i}" for i in range(200)] + ["tail"])

    async def test_separator_after_long_unterminated_piece(self) -> None:
        body = "x" * 10000
        result = await collect(split_stream(pieces(body, "-", "-8", "<--", "next"), "--8<--"))
        self.assertEqual(result, [body, "next"])

    async def test_partial_separator_prefixes_do_not_match(self) -> None:
        result = await collect(split_stream(pieces("a--8", "<-b", "--8<", "--c"), "--8<--"))
        self.assertEqual(result, ["a--8<-b", "c"])

    async def test_leading_separator_yields_empty_piece(self) -> None:
        result = await collect(split_stream(pieces("|a|b"), "|"))
        self.assertEqual(result, ["", "a", "b"])

    async def test_trailing_separator_has_no_remainder(self) -> None:
        result = await collect(split_stream(pieces("a|b|"), "|"))
        self.assertEqual(result, ["a", "b"])

    async def test_empty_stream(self) -> None:
        self.assertEqual(await collect(split_stream(pieces(), "|")), [])
        self.assertEqual(await collect(split_stream(pieces("", ""), "|")), [])

    async def test_empty_separator_is_rejected(self) -> None:
        with self.assertRaises(ValueError):
            await collect(split_stream(pieces("abc"), ""))

    async def test_yields_before_stream_ends(self) -> None:
        release = asyncio.Event()

        async def source():
            yield "first|sec"
            await release.wait()
            yield "ond"

        stream = split_stream(source(), "|")
        # The first piece is available while the source is still blocked.
        first = await asyncio.wait_for(stream.__anext__(), timeout=1)
        self.assertEqual(first, "first")
        release.set()
        self.assertEqual(await collect(stream), ["second"])


class TestExtractChunks(unittest.IsolatedAsyncioTestCase):
    """Tests for splitting log output into per-commit records."""

    async def test_sentinel_then_newline(self) -> None:
        result = await collect(extract_chunks(pieces("X\nSCISSOR\nY\nSCISSOR\nZ"), "SCISSOR"))
        self.assertEqual(result, ["X", "Y", "Z"])

    async def test_empty_chunks_are_skipped(self) -> None:
        text = f"{SCISSOR}\nhash: a\n\n{SCISSOR}\n   \n{SCISSOR}\nhash: b\n"
        result = await collect(extract_chunks(pieces(text)))
        self.assertEqual(result, ["hash: a", "hash: b"])

    async def test_chunks_are_trimmed(self) -> None:
        text = f"{SCISSOR}\n\n  hash: a\n1\t1\tf.txt\n\n\n"
        result = await collect(extract_chunks(pieces(text)))
        self.assertEqual(result, ["hash: a\n1\t1\tf.txt"])

    async def test_sentinel_without_newline_does_not_split(self) -> None:
        text = f"subject: mentions {SCISSOR} inline\n"
        result = await collect(extract_chunks(pieces(text)))
        self.assertEqual(result, [f"subject: mentions {SCISSOR} inline"])

    async def test_arrival_order_is_kept(self) -> None:
        text = "".join(f"{SCISSOR}\nhash: {i}\n" for i in range(50))
        # Feed the text in small uneven pieces.
        parts = [text[i:i + 7] for i in range(0, len(text), 7)]
        result = await collect(extract_chunks(pieces(*parts)))
        self.assertEqual(result, [f"hash: {i}" for i in range(50)])


if __name__ == "__main__":
    unittest.main()
