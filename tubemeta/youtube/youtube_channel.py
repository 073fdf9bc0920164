'''
Model a Youtube channel

:copyright  : Copyright 2026
:license    : GPLv3
'''

from typing import Self
from logging import Logger
from logging import getLogger
from contextlib import nullcontext
from dataclasses import field
from dataclasses import replace
from dataclasses import dataclass
from urllib.parse import unquote_plus

from ..util import remove_duplicates
from ..util import extract_simple_text
from ..util import unescape_json_string
from ..datatypes import FieldPolicy
from ..exceptions import InvalidUrl
from ..exceptions import TubeMetaError
from ..exceptions import ChannelNotFound

from .extraction import PatternStrategy
from .extraction import JsonFragmentStrategy
from .extraction import JSON_STRING_BODY
from .youtube_client import YouTubeClient
from .youtube_client import YOUTUBE_URL
from .youtube_streams import YouTubeStreamData
from .youtube_identifier import resolve_channel_url

_LOGGER: Logger = getLogger(__name__)

CHANNEL_ID_URL: str = YOUTUBE_URL + '/channel/{channel_id}'

HTTPS_PREFIX: str = 'https://'

# The 'about' data is the only fragment that identifies the channel, all
# other fields are searched for in the full page
ABOUT_CHANNEL: JsonFragmentStrategy = JsonFragmentStrategy(
    'about_channel',
    r'\[\{"aboutChannelRenderer":(.*?)\}\],"trackingParams',
    policy=FieldPolicy.REQUIRED, wrap='',
    error=ChannelNotFound, decode_error=InvalidUrl
)

CHANNEL_NAME: PatternStrategy = PatternStrategy(
    'name', rf'channelMetadataRenderer":\{{"title":"{JSON_STRING_BODY}"',
    transform=unescape_json_string, default=''
)

# The avatar and banner are listed in multiple sizes, we pick the image
# that follows the 88px avatar and the 1280x351 banner
CHANNEL_AVATAR: PatternStrategy = PatternStrategy(
    'avatar', rf'"height":88\}},\{{"url":"{JSON_STRING_BODY}"',
    transform=unescape_json_string, default=''
)

CHANNEL_BANNER: PatternStrategy = PatternStrategy(
    'banner', rf'"width":1280,"height":351\}},\{{"url":"{JSON_STRING_BODY}"',
    transform=unescape_json_string, default=''
)

CHANNEL_LIVE: PatternStrategy = PatternStrategy(
    'live', r'"style":"LIVE"', default=False
)

CHANNEL_VERIFIED: PatternStrategy = PatternStrategy(
    'verified', r'\{"text":"Verified"\}|"tooltip"\s*:\s*"Verified"',
    default=False
)


def _decode_social_link(encoded_url: str) -> str:
    return HTTPS_PREFIX + unquote_plus(encoded_url)


# Links in the channel description go through the YouTube redirector
CHANNEL_SOCIALS: PatternStrategy = PatternStrategy(
    'socials', r'q=https%3A%2F%2F([^"&\\]+)',
    transform=_decode_social_link, default=[]
)


@dataclass(frozen=True)
class YouTubeChannel:
    id: str
    name: str = ''
    description: str = ''
    avatar: str = ''
    banner: str = ''
    url: str = ''
    custom_url: str = ''
    subscribers: str = ''
    views: str = ''
    created_at: str = ''
    verified: bool = False
    live: bool = False
    videos: str = ''
    socials: list[str] = field(default_factory=list)
    ongoing_streams: list[str] = field(default_factory=list)
    streams: list[str] = field(default_factory=list)
    current_streams: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, str | bool | list[str]]:
        data: dict[str, str | bool | list[str]] = {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'avatar': self.avatar,
            'banner': self.banner,
            'url': self.url,
            'custom_url': self.custom_url,
            'subscribers': self.subscribers,
            'views': self.views,
            'created_at': self.created_at,
            'verified': self.verified,
            'live': self.live,
            'videos': self.videos,
            'socials': list(self.socials),
            'ongoing_streams': list(self.ongoing_streams),
            'streams': list(self.streams),
            'current_streams': list(self.current_streams),
        }

        return data

    @staticmethod
    def from_dict(data: dict[str, str | bool | list[str]]) -> Self:
        return YouTubeChannel(
            id=data['id'],
            name=data.get('name', ''),
            description=data.get('description', ''),
            avatar=data.get('avatar', ''),
            banner=data.get('banner', ''),
            url=data.get('url') or CHANNEL_ID_URL.format(channel_id=data['id']),
            custom_url=data.get('custom_url', ''),
            subscribers=data.get('subscribers', ''),
            views=data.get('views', ''),
            created_at=data.get('created_at', ''),
            verified=data.get('verified', False),
            live=data.get('live', False),
            videos=data.get('videos', ''),
            socials=list(data.get('socials') or []),
            ongoing_streams=list(data.get('ongoing_streams') or []),
            streams=list(data.get('streams') or []),
            current_streams=list(data.get('current_streams') or []),
        )

    def with_streams(self, stream_data: YouTubeStreamData) -> Self:
        '''
        Returns a copy of the channel with the stream IDs of the channel
        '''

        return replace(
            self,
            streams=list(stream_data.streams),
            ongoing_streams=list(stream_data.ongoing_streams),
            current_streams=list(stream_data.current_streams),
        )

    @staticmethod
    def parse_nested_dicts(keys: list[str], data: dict[str, any],
                           final_type: type
                           ) -> str | int | float | list | dict | None:
        for key in keys:
            if isinstance(data, dict) and key in data:
                data = data[key]
            else:
                return None

        if not isinstance(data, final_type):
            _LOGGER.debug(
                f'Expected value of {final_type} but got {type(data)}'
            )
            return None

        return data

    @staticmethod
    def parse_socials(page_data: str) -> list[str]:
        '''
        Parses the external links out of the channel page

        :param page_data: the HTML of the channel page
        :returns: the decoded URLs, without duplicates
        '''

        return remove_duplicates(CHANNEL_SOCIALS.extract_all(page_data))

    @staticmethod
    def parse_about_page(page_data: str) -> Self:
        '''
        Parses the 'about' page of a channel

        :param page_data: the HTML of the 'about' page
        :returns: the channel, without the stream IDs of the channel
        :raises: ChannelNotFound if the page has no channel data, InvalidUrl
        if the channel data could not be decoded
        '''

        about_data: dict[str, any] = ABOUT_CHANNEL.extract(page_data)

        view_model: dict[str, any] | None = YouTubeChannel.parse_nested_dicts(
            ['metadata', 'aboutChannelViewModel'], about_data, dict
        )
        if not view_model or not view_model.get('channelId'):
            raise InvalidUrl('Channel data does not have a channel ID')

        channel_id: str = view_model['channelId']

        channel = YouTubeChannel(
            id=channel_id,
            url=CHANNEL_ID_URL.format(channel_id=channel_id),
            description=extract_simple_text(view_model.get('description')),
            custom_url=extract_simple_text(
                view_model.get('canonicalChannelUrl')
            ),
            subscribers=extract_simple_text(
                view_model.get('subscriberCountText')
            ),
            views=extract_simple_text(view_model.get('viewCountText')),
            created_at=extract_simple_text(view_model.get('joinedDateText')),
            videos=extract_simple_text(view_model.get('videoCountText')),
            name=CHANNEL_NAME.extract(page_data),
            avatar=CHANNEL_AVATAR.extract(page_data),
            banner=CHANNEL_BANNER.extract(page_data),
            live=CHANNEL_LIVE.matches(page_data),
            verified=CHANNEL_VERIFIED.matches(page_data),
            socials=YouTubeChannel.parse_socials(page_data),
        )

        return channel

    @staticmethod
    def scrape(identifier: str, client: YouTubeClient | None = None) -> Self:
        '''
        Scrapes the 'about' and 'streams' pages of a channel

        :param identifier: channel ID, custom URL or handle of the channel
        :param client: the client to fetch the pages with, a client is
        created for this call if none is provided
        :returns: the channel
        :raises: InvalidIdentifier, ChannelNotFound, InvalidUrl
        '''

        channel_url: str = resolve_channel_url(identifier)
        about_url: str = channel_url.rstrip('/') + '/about'

        context = nullcontext(client) if client else YouTubeClient()
        with context as browse_client:
            page_data: str = browse_client.fetch_page(about_url)
            channel: YouTubeChannel = YouTubeChannel.parse_about_page(
                page_data
            )

            try:
                stream_data: YouTubeStreamData = YouTubeStreamData.scrape(
                    channel.id, browse_client
                )
            except TubeMetaError as exc:
                _LOGGER.warning(
                    f'No stream data for channel {channel.id}: {exc}'
                )
                return channel

        return channel.with_streams(stream_data)


def resolve_channel(identifier: str, client: YouTubeClient | None = None
                    ) -> YouTubeChannel:
    '''
    Resolves a channel identifier to the metadata of the channel

    :param identifier: channel ID ('UC...'), custom URL ('c/...') or handle
    ('@...') of the channel
    :param client: optional client to fetch the pages with
    :returns: the channel
    :raises: InvalidIdentifier, ChannelNotFound, InvalidUrl
    '''

    return YouTubeChannel.scrape(identifier, client)
