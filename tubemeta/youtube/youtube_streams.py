'''
Model the live streams listed on the 'streams' tab of a YouTube channel

:copyright  : Copyright 2026
:license    : GPLv3
'''

import re

from typing import Self
from logging import Logger
from logging import getLogger
from dataclasses import field
from dataclasses import dataclass

from ..util import remove_duplicates
from ..datatypes import FieldPolicy
from ..exceptions import StreamNotFound

from .extraction import PatternStrategy
from .youtube_client import YouTubeClient
from .youtube_client import YOUTUBE_URL

_LOGGER: Logger = getLogger(__name__)

STREAMS_URL: str = YOUTUBE_URL + '/channel/{channel_id}/streams'

VIDEO_ID_CHARS: str = r'[A-Za-z0-9_-]{11}'

STREAM_IDS: PatternStrategy = PatternStrategy(
    'stream_ids', rf'"videoId":"({VIDEO_ID_CHARS})"',
    policy=FieldPolicy.REQUIRED, error=StreamNotFound
)

# Each video on the page is a separate renderer object, the style of its
# thumbnail overlay and its 'watch later' action only apply to that video
RX_VIDEO_RENDERER: re.Pattern[str] = re.compile(
    r'"(?:videoRenderer|gridVideoRenderer)":\{'
)

RENDERER_VIDEO_ID: PatternStrategy = PatternStrategy(
    'renderer_video_id', rf'"videoId":"({VIDEO_ID_CHARS})"', default=None
)

UPCOMING_STYLE: PatternStrategy = PatternStrategy(
    'upcoming_style', r'"style":"UPCOMING"', default=False
)

ADDED_VIDEO_IDS: PatternStrategy = PatternStrategy(
    'added_video_ids', rf'"addedVideoId":"({VIDEO_ID_CHARS})"', default=[]
)

# Thumbnail of a stream that is broadcasting, ie. '/vi/<id>/hqdefault_live.jpg'
LIVE_THUMBNAIL_PATH: str = r'/vi(?:_webp)?/{video_id}/[a-z]*default_live\.'


def live_thumbnail_strategy(video_id: str) -> PatternStrategy:
    return PatternStrategy(
        f'live_thumbnail_{video_id}',
        LIVE_THUMBNAIL_PATH.format(video_id=re.escape(video_id)),
        policy=FieldPolicy.OPTIONAL, default=False
    )


@dataclass(frozen=True)
class YouTubeStreamData:
    streams: list[str] = field(default_factory=list)
    ongoing_streams: list[str] = field(default_factory=list)
    current_streams: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, list[str]]:
        return {
            'streams': list(self.streams),
            'ongoing_streams': list(self.ongoing_streams),
            'current_streams': list(self.current_streams),
        }

    @staticmethod
    def parse(page_data: str) -> Self:
        '''
        Parses the stream IDs out of the 'streams' page of a channel. The
        'current' and 'ongoing' classifications are determined independently
        and a stream may show up in both.

        :param page_data: the HTML of the 'streams' page
        :returns: the stream data
        :raises: StreamNotFound if the page lists no streams or no
        upcoming streams
        '''

        streams: list[str] = remove_duplicates(
            STREAM_IDS.extract_all(page_data)
        )

        current_streams: list[str] = [
            video_id for video_id in streams
            if live_thumbnail_strategy(video_id).matches(page_data)
        ]

        ongoing_streams: list[str] = YouTubeStreamData.parse_upcoming(
            page_data
        )

        _LOGGER.debug(
            f'Found {len(streams)} streams, {len(current_streams)} live, '
            f'{len(ongoing_streams)} upcoming'
        )

        return YouTubeStreamData(
            streams=streams, ongoing_streams=ongoing_streams,
            current_streams=current_streams
        )

    @staticmethod
    def parse_upcoming(page_data: str) -> list[str]:
        '''
        Finds the videos that are scheduled but not yet broadcasting. A
        video counts when its own renderer has the 'UPCOMING' overlay
        style and a 'watch later' action for the video.

        :param page_data: the HTML of the 'streams' page
        :returns: the IDs of the upcoming streams, without duplicates
        :raises: StreamNotFound if the page lists no upcoming streams
        '''

        upcoming: list[str] = []
        for renderer in RX_VIDEO_RENDERER.split(page_data or '')[1:]:
            video_id: str | None = RENDERER_VIDEO_ID.extract(renderer)
            if not video_id or not UPCOMING_STYLE.matches(renderer):
                continue

            if video_id in ADDED_VIDEO_IDS.extract_all(renderer):
                upcoming.append(video_id)

        if not upcoming:
            raise StreamNotFound('upcoming_stream_ids: no match')

        return remove_duplicates(upcoming)

    @staticmethod
    def scrape(channel_id: str, client: YouTubeClient) -> Self:
        '''
        Fetches and parses the 'streams' page of a channel

        :param channel_id: the channel ID, ie. 'UC22BdTgxefuvUivrjesETjg'
        :param client: the client to fetch the page with
        :returns: the stream data
        :raises: InvalidUrl, StreamNotFound
        '''

        url: str = STREAMS_URL.format(channel_id=channel_id)
        page_data: str = client.fetch_page(url)

        return YouTubeStreamData.parse(page_data)
