'''
Classifies channel identifiers and maps them to the URL of the channel

:copyright  : Copyright 2026
:license    : GPLv3
'''

import re

from logging import Logger
from logging import getLogger
from dataclasses import dataclass

from ..datatypes import ChannelIdentifierType
from ..exceptions import InvalidIdentifier

from .youtube_client import YOUTUBE_URL

_LOGGER: Logger = getLogger(__name__)

CHANNEL_URL: str = YOUTUBE_URL + '/channel/UC{segment}'
CHANNEL_CUSTOM_URL: str = YOUTUBE_URL + '/c/{segment}'
CHANNEL_HANDLE_URL: str = YOUTUBE_URL + '/@{segment}'

# Alternatives are tried left to right at each position of the identifier
# so a full channel URL can be passed in as well
RX_CHANNEL_IDENTIFIER: re.Pattern[str] = re.compile(
    r'UC(?P<canonical>[^/?#\s]+)'
    r'|c/(?P<custom_url>[^/?#\s]+)'
    r'|@(?P<handle>[^/?#\s]+)'
)

URL_TEMPLATES: dict[ChannelIdentifierType, str] = {
    ChannelIdentifierType.CANONICAL: CHANNEL_URL,
    ChannelIdentifierType.CUSTOM_URL: CHANNEL_CUSTOM_URL,
    ChannelIdentifierType.HANDLE: CHANNEL_HANDLE_URL,
}


@dataclass(frozen=True)
class ChannelIdentifier:
    kind: ChannelIdentifierType
    segment: str = ''

    @property
    def valid(self) -> bool:
        return self.kind != ChannelIdentifierType.INVALID

    @property
    def url(self) -> str:
        if not self.valid:
            raise InvalidIdentifier('No URL for an invalid channel identifier')

        return URL_TEMPLATES[self.kind].format(segment=self.segment)

    @staticmethod
    def classify(identifier: str) -> 'ChannelIdentifier':
        '''
        Classifies a channel identifier as a channel ID ('UC...'), a custom
        URL ('c/...') or a handle ('@...')

        :param identifier: the identifier, optionally as part of a URL
        :returns: the identifier, with kind INVALID if it could not be
        classified
        '''

        match: re.Match[str] | None = RX_CHANNEL_IDENTIFIER.search(
            identifier or ''
        )
        if not match or not match.lastgroup:
            return ChannelIdentifier(ChannelIdentifierType.INVALID)

        segment: str = match.group(match.lastgroup)
        if not segment:
            return ChannelIdentifier(ChannelIdentifierType.INVALID)

        return ChannelIdentifier(
            ChannelIdentifierType(match.lastgroup), segment
        )


def resolve_channel_url(identifier: str) -> str:
    '''
    Gets the URL of the channel page for a channel identifier

    :param identifier: channel ID, custom URL or handle of the channel
    :returns: the URL of the channel
    :raises: InvalidIdentifier
    '''

    channel_identifier: ChannelIdentifier = \
        ChannelIdentifier.classify(identifier)

    if not channel_identifier.valid:
        raise InvalidIdentifier(f'Invalid channel identifier: {identifier}')

    _LOGGER.debug(
        f'Channel identifier {identifier} is a '
        f'{channel_identifier.kind.value}'
    )

    return channel_identifier.url
