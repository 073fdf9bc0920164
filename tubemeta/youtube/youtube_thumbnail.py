'''
Model a thumbnail of a Youtube video

:copyright  : Copyright 2026
:license    : GPLv3
'''

from typing import Self
from dataclasses import dataclass


@dataclass(frozen=True)
class YouTubeThumbnail:
    url: str | None = None
    width: int | None = None
    height: int | None = None

    @staticmethod
    def from_dict(data: dict[str, str | int]) -> Self:
        '''
        Factory for YouTubeThumbnail, parses an entry of a 'thumbnails' list
        in the data embedded in YouTube pages
        '''

        if not isinstance(data, dict):
            return YouTubeThumbnail()

        url: str | None = data.get('url')
        # Some thumbnails are listed without protocol
        if url and url.startswith('//'):
            url = f'https:{url}'

        return YouTubeThumbnail(
            url=url, width=data.get('width'), height=data.get('height')
        )

    @staticmethod
    def parse_thumbnails(thumbnail_data: list[dict[str, str | int]] | None
                         ) -> list[Self]:
        '''
        Parses a list of thumbnails, keeping the order in which they were
        listed and skipping thumbnails without URL
        '''

        thumbnails: list[YouTubeThumbnail] = []
        for item in thumbnail_data or []:
            thumbnail: YouTubeThumbnail = YouTubeThumbnail.from_dict(item)
            if thumbnail.url:
                thumbnails.append(thumbnail)

        return thumbnails
