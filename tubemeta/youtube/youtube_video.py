'''
Model a Youtube video

:copyright  : Copyright 2026
:license    : GPLv3
'''

import re
import html

from typing import Self
from logging import Logger
from logging import getLogger
from datetime import datetime
from contextlib import nullcontext
from dataclasses import field
from dataclasses import dataclass

from ..util import parse_rfc3339
from ..util import convert_number_string
from ..datatypes import FieldPolicy
from ..datatypes import VideoIdentifierType
from ..exceptions import InvalidUrl
from ..exceptions import InvalidVideoId

from .extraction import PatternStrategy
from .extraction import JsonFragmentStrategy
from .youtube_client import YouTubeClient
from .youtube_client import YOUTUBE_URL
from .youtube_thumbnail import YouTubeThumbnail

_LOGGER: Logger = getLogger(__name__)

VIDEO_URL: str = YOUTUBE_URL + '/watch?v={video_id}'

VIDEO_ID_CHARS: str = r'[A-Za-z0-9_-]{11}'

# Tried in order, the first pattern that matches provides the video ID
VIDEO_ID_PATTERNS: list[tuple[VideoIdentifierType, re.Pattern[str]]] = [
    (
        VideoIdentifierType.SHORT_LINK,
        re.compile(rf'\.be/({VIDEO_ID_CHARS})')
    ),
    (
        VideoIdentifierType.QUERY,
        re.compile(rf'(?:^|[?&/])v=({VIDEO_ID_CHARS})(?:[&#]|$)')
    ),
    (
        VideoIdentifierType.BARE,
        re.compile(rf'^({VIDEO_ID_CHARS})$')
    ),
]


def _parse_count(count_text: str) -> int:
    try:
        return convert_number_string(count_text)
    except ValueError as exc:
        _LOGGER.debug(f'Could not parse count {count_text}: {exc}')
        return 0


UPLOAD_DATE: PatternStrategy = PatternStrategy(
    'upload_date', r'<meta itemprop="uploadDate" content="(.*?)">',
    transform=parse_rfc3339, default=None
)

GENRE: PatternStrategy = PatternStrategy(
    'genre', r'<meta itemprop="genre" content="(.*?)">',
    transform=html.unescape, default=''
)

LIKE_COUNT: PatternStrategy = PatternStrategy(
    'like_count', r'expandedLikeCountIfIndifferent":\{"content":"(.*?)"\}',
    transform=_parse_count, default=0
)

LIVE_BROADCAST_DETAILS: JsonFragmentStrategy = JsonFragmentStrategy(
    'live_broadcast_details', r'liveBroadcastDetails":\{(.*?)\}',
    default=None
)

# 'isLiveContent' is the last key of the videoDetails object
VIDEO_DETAILS: JsonFragmentStrategy = JsonFragmentStrategy(
    'video_details', r'videoDetails":(\{.*?"isLiveContent":.*?\})',
    policy=FieldPolicy.REQUIRED, wrap='', error=InvalidUrl
)


@dataclass(frozen=True)
class VideoIdentifier:
    kind: VideoIdentifierType
    video_id: str = ''

    @property
    def valid(self) -> bool:
        return self.kind != VideoIdentifierType.INVALID

    @staticmethod
    def classify(url_or_id: str) -> 'VideoIdentifier':
        '''
        Classifies a video reference as a youtu.be short link, a URL with a
        'v=' query parameter or a bare video ID. The forms are tried in
        that order.

        :param url_or_id: the URL or ID of the video
        :returns: the identifier, with kind INVALID if no video ID was found
        '''

        text: str = (url_or_id or '').strip()
        for kind, pattern in VIDEO_ID_PATTERNS:
            match: re.Match[str] | None = pattern.search(text)
            if match and match.group(1):
                return VideoIdentifier(kind, match.group(1))

        return VideoIdentifier(VideoIdentifierType.INVALID)


@dataclass(frozen=True)
class YouTubeVideo:
    id: str
    title: str = ''
    description: str = ''
    view_count: int = 0
    like_count: int = 0
    live_now: bool = False
    live_content: bool = False
    scheduled_start_time: datetime | None = None
    upload_date: datetime | None = None
    thumbnails: list[str] = field(default_factory=list)
    url: str = ''
    tags: list[str] = field(default_factory=list)
    duration: str = ''
    channel_id: str = ''
    genre: str = ''

    def to_dict(self) -> dict[str, any]:
        '''
        Returns a dict representation of the video
        '''

        data: dict[str, any] = {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'view_count': self.view_count,
            'like_count': self.like_count,
            'live_now': self.live_now,
            'live_content': self.live_content,
            'scheduled_start_time': None,
            'upload_date': None,
            'thumbnails': list(self.thumbnails),
            'url': self.url,
            'tags': list(self.tags),
            'duration': self.duration,
            'channel_id': self.channel_id,
            'genre': self.genre,
        }

        if self.scheduled_start_time:
            data['scheduled_start_time'] = \
                self.scheduled_start_time.isoformat()

        if self.upload_date:
            data['upload_date'] = self.upload_date.isoformat()

        return data

    @staticmethod
    def from_dict(data: dict[str, any]) -> Self:
        '''
        Factory for YouTubeVideo, parses data provided by to_dict
        '''

        return YouTubeVideo(
            id=data['id'],
            title=data.get('title', ''),
            description=data.get('description', ''),
            view_count=data.get('view_count', 0),
            like_count=data.get('like_count', 0),
            live_now=data.get('live_now', False),
            live_content=data.get('live_content', False),
            scheduled_start_time=parse_rfc3339(
                data.get('scheduled_start_time')
            ),
            upload_date=parse_rfc3339(data.get('upload_date')),
            thumbnails=list(data.get('thumbnails') or []),
            url=data.get('url') or VIDEO_URL.format(video_id=data['id']),
            tags=list(data.get('tags') or []),
            duration=data.get('duration', ''),
            channel_id=data.get('channel_id', ''),
            genre=data.get('genre', ''),
        )

    @staticmethod
    def resolve_video_id(url_or_id: str) -> str:
        '''
        Gets the video ID out of a watch URL, a youtu.be short link or
        a bare video ID

        :param url_or_id: the URL or ID of the video
        :returns: the 11-character video ID
        :raises: InvalidVideoId
        '''

        video_identifier: VideoIdentifier = VideoIdentifier.classify(url_or_id)
        if not video_identifier.valid:
            raise InvalidVideoId(f'No video ID in {url_or_id}')

        _LOGGER.debug(
            f'Found video ID in {video_identifier.kind.value} form: '
            f'{url_or_id}'
        )
        return video_identifier.video_id

    @staticmethod
    def parse_watch_page(video_id: str, page_data: str) -> Self:
        '''
        Parses the metadata of a video out of its watch page

        :param video_id: the ID of the video
        :param page_data: the HTML of the watch page
        :returns: the video
        :raises: InvalidUrl if the page does not have decodable video details
        '''

        details: dict[str, any] = VIDEO_DETAILS.extract(page_data)

        live_details: dict[str, any] = \
            LIVE_BROADCAST_DETAILS.extract(page_data) or {}

        try:
            view_count: int = int(details.get('viewCount', ''))
        except (TypeError, ValueError):
            _LOGGER.debug(f'No valid view count for video {video_id}')
            view_count = 0

        thumbnails: list[YouTubeThumbnail] = \
            YouTubeThumbnail.parse_thumbnails(
                details.get('thumbnail', {}).get('thumbnails')
                if isinstance(details.get('thumbnail'), dict) else None
            )

        start_timestamp: str | None = live_details.get('startTimestamp')

        video = YouTubeVideo(
            id=video_id,
            url=VIDEO_URL.format(video_id=video_id),
            title=details.get('title') or '',
            description=details.get('shortDescription') or '',
            view_count=view_count,
            like_count=LIKE_COUNT.extract(page_data),
            live_now=bool(live_details.get('isLiveNow', False)),
            live_content=bool(details.get('isLiveContent', False)),
            scheduled_start_time=parse_rfc3339(start_timestamp)
            if isinstance(start_timestamp, str) else None,
            upload_date=UPLOAD_DATE.extract(page_data),
            thumbnails=[thumbnail.url for thumbnail in thumbnails],
            tags=list(details.get('keywords') or []),
            duration=str(details.get('lengthSeconds') or ''),
            channel_id=details.get('channelId') or '',
            genre=GENRE.extract(page_data),
        )

        return video

    @staticmethod
    def scrape(url_or_id: str, client: YouTubeClient | None = None) -> Self:
        '''
        Collects data about a video by scraping the webpage for the video

        :param url_or_id: the URL or ID of the video
        :param client: the client to fetch the page with, a client is
        created for this call if none is provided
        :returns: the video
        :raises: InvalidVideoId, InvalidUrl
        '''

        video_id: str = YouTubeVideo.resolve_video_id(url_or_id)
        canonical_url: str = VIDEO_URL.format(video_id=video_id)

        context = nullcontext(client) if client else YouTubeClient()
        with context as browse_client:
            page_data: str = browse_client.fetch_page(canonical_url)

        return YouTubeVideo.parse_watch_page(video_id, page_data)


def resolve_video(url_or_id: str, client: YouTubeClient | None = None
                  ) -> YouTubeVideo:
    '''
    Resolves a video URL or ID to the metadata of the video

    :param url_or_id: watch URL, youtu.be short link or video ID
    :param client: optional client to fetch the page with
    :returns: the video
    :raises: InvalidVideoId, InvalidUrl
    '''

    return YouTubeVideo.scrape(url_or_id, client)
