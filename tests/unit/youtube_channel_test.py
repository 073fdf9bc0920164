#!/usr/bin/env python3
'''
Unit tests for YouTubeChannel
'''

import unittest

from pathlib import Path
from unittest.mock import MagicMock

import orjson
import jsonschema

from tubemeta.exceptions import InvalidUrl
from tubemeta.exceptions import ChannelNotFound
from tubemeta.exceptions import StreamNotFound
from tubemeta.exceptions import InvalidIdentifier
from tubemeta.youtube.youtube_client import YouTubeClient
from tubemeta.youtube.youtube_streams import YouTubeStreamData
from tubemeta.youtube.youtube_channel import (
    YouTubeChannel,
    resolve_channel,
)

COLLATERAL_DIR: Path = Path(__file__).parent.parent / 'collateral'
ABOUT_PAGE: str = (COLLATERAL_DIR / 'pages' / 'channel_about.html').read_text()
STREAMS_PAGE: str = (
    COLLATERAL_DIR / 'pages' / 'channel_streams.html'
).read_text()
SCHEMA_PATH: Path = COLLATERAL_DIR / 'tubemeta-channel-schema.json'

CHANNEL_ID: str = 'UC22BdTgxefuvUivrjesETjg'


def _mock_client(pages: dict[str, str | Exception]) -> MagicMock:
    client = MagicMock(spec=YouTubeClient)

    def fetch_page(url: str) -> str:
        for suffix, page in pages.items():
            if url.endswith(suffix):
                if isinstance(page, Exception):
                    raise page
                return page
        raise InvalidUrl(f'No page data for {url}')

    client.fetch_page.side_effect = fetch_page
    return client


class TestYouTubeChannel(unittest.TestCase):
    def test_parse_about_page(self) -> None:
        channel: YouTubeChannel = YouTubeChannel.parse_about_page(ABOUT_PAGE)

        self.assertEqual(channel.id, CHANNEL_ID)
        self.assertEqual(
            channel.url, f'https://www.youtube.com/channel/{CHANNEL_ID}'
        )
        self.assertEqual(channel.name, 'History Matters')
        self.assertEqual(
            channel.description, 'Short history videos\nabout everything.'
        )
        self.assertEqual(
            channel.custom_url, 'http://www.youtube.com/@HistoryMatters'
        )
        self.assertEqual(channel.subscribers, '1.88M subscribers')
        self.assertEqual(channel.views, '755,841,320 views')
        self.assertEqual(channel.created_at, 'Joined Aug 2, 2015')
        self.assertEqual(channel.videos, '384 videos')
        self.assertEqual(
            channel.avatar,
            'https://yt3.googleusercontent.com/ytc/'
            'AIdro_k=s176-c-k-c0x00ffffff-no-rj'
        )
        self.assertTrue(channel.banner.startswith(
            'https://yt3.googleusercontent.com/banner=w2120'
        ))
        self.assertEqual(
            channel.socials,
            [
                'https://www.patreon.com/historymatters',
                'https://twitter.com/HistoryMatters1',
            ]
        )
        self.assertFalse(channel.live)
        self.assertEqual(channel.streams, [])
        self.assertEqual(channel.ongoing_streams, [])
        self.assertEqual(channel.current_streams, [])

    def test_verified_absent(self) -> None:
        channel: YouTubeChannel = YouTubeChannel.parse_about_page(ABOUT_PAGE)
        self.assertFalse(channel.verified)
        self.assertEqual(channel.id, CHANNEL_ID)
        self.assertEqual(channel.name, 'History Matters')
        self.assertTrue(channel.subscribers)

    def test_verified_and_live_markers(self) -> None:
        for marker in (
            '{"metadataBadgeRenderer":{"tooltip":"Verified"}}',
            '{"accessibility":{"text":"Verified"}}',
        ):
            page: str = ABOUT_PAGE.replace(
                '</body>', f'<script>var x = {marker};</script></body>'
            )
            channel: YouTubeChannel = YouTubeChannel.parse_about_page(page)
            self.assertTrue(channel.verified)

        page = ABOUT_PAGE.replace(
            '</body>', '<script>var x = {"style":"LIVE"};</script></body>'
        )
        self.assertTrue(YouTubeChannel.parse_about_page(page).live)

    def test_optional_fields_default(self) -> None:
        page: str = (
            '[{"aboutChannelRenderer":{"metadata":{"aboutChannelViewModel":'
            '{"channelId":"UCabc"}}}}],"trackingParams":"x"'
        )
        channel: YouTubeChannel = YouTubeChannel.parse_about_page(page)
        self.assertEqual(channel.id, 'UCabc')
        self.assertEqual(channel.url, 'https://www.youtube.com/channel/UCabc')
        for value in (
            channel.name, channel.description, channel.avatar,
            channel.banner, channel.custom_url, channel.subscribers,
            channel.views, channel.created_at, channel.videos
        ):
            self.assertEqual(value, '')
        self.assertFalse(channel.verified)
        self.assertFalse(channel.live)
        self.assertEqual(channel.socials, [])

    def test_missing_about_fragment(self) -> None:
        with self.assertRaises(ChannelNotFound):
            YouTubeChannel.parse_about_page('<html>consent page</html>')

    def test_undecodable_about_fragment(self) -> None:
        with self.assertRaises(InvalidUrl):
            YouTubeChannel.parse_about_page(
                '[{"aboutChannelRenderer":{"metadata":{broken}}],'
                '"trackingParams":"x"'
            )

        # Decodes but does not identify a channel
        with self.assertRaises(InvalidUrl):
            YouTubeChannel.parse_about_page(
                '[{"aboutChannelRenderer":{"metadata":{}}}],'
                '"trackingParams":"x"'
            )

    def test_parse_socials_decodes_and_deduplicates(self) -> None:
        page: str = (
            '"url":"https://www.youtube.com/redirect?q=https%3A%2F%2Fa.'
            'example%2Fpath%3Fx%3D1"'
            '"url":"https://www.youtube.com/redirect?q=https%3A%2F%2Fb.'
            'example%2Fmy+page\\u0026v=abc"'
            '"url":"https://www.youtube.com/redirect?q=https%3A%2F%2Fa.'
            'example%2Fpath%3Fx%3D1"'
        )
        self.assertEqual(
            YouTubeChannel.parse_socials(page),
            ['https://a.example/path?x=1', 'https://b.example/my page']
        )

    def test_with_streams(self) -> None:
        channel: YouTubeChannel = YouTubeChannel.parse_about_page(ABOUT_PAGE)
        stream_data = YouTubeStreamData(
            streams=['AAAAAAAAAAA', 'BBBBBBBBBBB'],
            ongoing_streams=['BBBBBBBBBBB'],
            current_streams=['AAAAAAAAAAA'],
        )
        merged: YouTubeChannel = channel.with_streams(stream_data)
        self.assertEqual(merged.streams, ['AAAAAAAAAAA', 'BBBBBBBBBBB'])
        self.assertEqual(merged.ongoing_streams, ['BBBBBBBBBBB'])
        self.assertEqual(merged.current_streams, ['AAAAAAAAAAA'])
        self.assertEqual(merged.name, channel.name)
        self.assertEqual(channel.streams, [])

    def test_parse_nested_dicts(self) -> None:
        data: dict = {'a': {'b': {'c': [1, 2, 3]}}}
        self.assertEqual(
            YouTubeChannel.parse_nested_dicts(['a', 'b', 'c'], data, list),
            [1, 2, 3]
        )
        self.assertIsNone(
            YouTubeChannel.parse_nested_dicts(['x', 'y'], data, dict)
        )
        self.assertIsNone(
            YouTubeChannel.parse_nested_dicts(['a', 'b', 'c'], data, dict)
        )

    def test_to_dict_matches_schema_and_round_trips(self) -> None:
        channel: YouTubeChannel = YouTubeChannel.parse_about_page(
            ABOUT_PAGE
        ).with_streams(YouTubeStreamData.parse(STREAMS_PAGE))

        data: dict = channel.to_dict()
        schema: dict = orjson.loads(SCHEMA_PATH.read_bytes())
        jsonschema.validate(instance=data, schema=schema)

        self.assertEqual(
            YouTubeChannel.from_dict(orjson.loads(orjson.dumps(data))),
            channel
        )


class TestResolveChannel(unittest.TestCase):
    def test_resolve_channel_merges_streams(self) -> None:
        client: MagicMock = _mock_client(
            {'/about': ABOUT_PAGE, '/streams': STREAMS_PAGE}
        )
        channel: YouTubeChannel = resolve_channel('@HistoryMatters', client)

        client.fetch_page.assert_any_call(
            'https://www.youtube.com/@HistoryMatters/about'
        )
        client.fetch_page.assert_any_call(
            f'https://www.youtube.com/channel/{CHANNEL_ID}/streams'
        )
        self.assertEqual(channel.id, CHANNEL_ID)
        self.assertEqual(
            channel.streams, ['AAAAAAAAAAA', 'BBBBBBBBBBB', 'CCCCCCCCCCC']
        )
        self.assertEqual(channel.current_streams, ['BBBBBBBBBBB'])
        self.assertEqual(channel.ongoing_streams, ['CCCCCCCCCCC'])

    def test_stream_failure_is_not_fatal(self) -> None:
        for streams_page in (
            '<html>no streams</html>',
            StreamNotFound('no streams'),
            InvalidUrl('fetch failed'),
        ):
            client: MagicMock = _mock_client(
                {'/about': ABOUT_PAGE, '/streams': streams_page}
            )
            channel: YouTubeChannel = resolve_channel(CHANNEL_ID, client)
            self.assertEqual(channel.id, CHANNEL_ID)
            self.assertEqual(channel.name, 'History Matters')
            self.assertEqual(channel.streams, [])
            self.assertEqual(channel.ongoing_streams, [])
            self.assertEqual(channel.current_streams, [])

    def test_about_page_errors_propagate(self) -> None:
        with self.assertRaises(InvalidIdentifier):
            resolve_channel('not a channel', _mock_client({}))

        with self.assertRaises(InvalidUrl):
            resolve_channel('@HistoryMatters', _mock_client({}))

        with self.assertRaises(ChannelNotFound):
            resolve_channel(
                'c/HistoryMatters',
                _mock_client({'/about': '<html>consent</html>'})
            )


if __name__ == '__main__':
    unittest.main()
