'''
Manages connections to YouTube for fetching channel and video pages.

:copyright  : Copyright 2026
:license    : GPLv3
'''

import os

from logging import Logger
from logging import getLogger

from httpx import URL
from httpx import Client
from httpx import Response
from httpx import RequestError

from ..exceptions import InvalidUrl


_LOGGER: Logger = getLogger(__name__)

YOUTUBE_DOMAIN: str = '.youtube.com'

# httpx does not follow redirects, get() follows one of these itself
REDIRECT_CODES: tuple[int, ...] = (301, 302, 303, 307, 308)

YOUTUBE_URL: str = os.environ.get(
    'TUBEMETA_YOUTUBE_URL', 'https://www.youtube.com'
).rstrip('/')

HEADERS: dict[str, str] = {
    'Accept-Language': 'en-US,en;q=0.9',
    'Accept': (
        'text/html,application/xhtml+xml,'
        'application/xml;q=0.9,*/*;q=0.8'
    ),
}
USER_AGENT: str = (
    'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 '
    '(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36'
)

CONSENT_COOKIES: dict[str, str] = {
    'CONSENT': 'YES+cb.20210328-17-p0.en+FX+100',
    'SOCS': (
        'CAISNQgDEitib3FfaWRlbnRpdHlmcm9udGVuZHVpc2VydmVyXzIwMjM'
        'wODI5LjA3X3AwGgJlbiADGgYIgICUoQY'
    ),
}


class YouTubeClient(Client):
    '''
    A blocking HTTP client for fetching pages from YouTube.
    '''

    def __init__(self, user_agent: str = USER_AGENT,
                 headers: dict[str, str] = HEADERS,
                 consent_cookies: dict[str, str] = CONSENT_COOKIES,
                 **kwargs) -> None:
        '''
        Initializes the YouTube client.

        :param user_agent: User-Agent header to send with each request
        :param headers: HTTP headers to send with each request
        :param consent_cookies: cookies to bypass the consent page
        :param kwargs: Additional arguments to pass to the HTTP client.
        '''

        super().__init__(**kwargs)

        self.headers = headers.copy()

        self.consent_cookies: dict[str, str] = consent_cookies
        if user_agent:
            self.headers['User-Agent'] = user_agent

        for name, value in consent_cookies.items():
            self.cookies.set(
                name, value, domain=YOUTUBE_DOMAIN, path='/'
            )

    def get_headers(self) -> dict[str, str]:
        '''
        Get the current HTTP headers for the client.

        :returns: A dictionary of HTTP headers.
        '''

        return dict(self.headers)

    def get(self, url: str, redirect: bool = True, **kwargs) -> str | None:
        '''
        Performs a GET request to the specified URL.

        :param url: The URL to send the GET request to.
        :param redirect: follow one redirect (301, 302, 303, 307 or 308)
        to another YouTube URL
        :param kwargs: Additional arguments to pass to the GET request.
        :returns: The body of the response or None if the response status
        was not 200
        :raises: httpx.RequestError on transport errors
        '''

        try:
            _LOGGER.debug(f'HTTP GET {url}')
            resp: Response = super().get(url, **kwargs)
        except RequestError as exc:
            _LOGGER.debug(f'HTTP GET request error for {url}: {exc}')
            raise

        if resp.status_code in REDIRECT_CODES and redirect:
            location: str | None = self._redirect_target(
                url, resp.headers.get('Location')
            )
            # Follow redirect just once if it redirects to another YouTube URL
            if location:
                _LOGGER.debug(
                    f'Following {resp.status_code} redirect to {location}'
                )
                return self.get(location, redirect=False, **kwargs)

        if resp.status_code != 200:
            _LOGGER.warning(f'Scrape for {url} failed: {resp.status_code}')
            return None

        return resp.text

    @staticmethod
    def _redirect_target(url: str, location: str | None) -> str | None:
        '''
        Resolves the Location of a redirect against the requested URL

        :returns: the URL to follow or None if it is not a YouTube URL
        '''

        if not location:
            return None

        source: URL = URL(url)
        target: URL = source.join(location)
        on_youtube: bool = f'.{target.host}'.endswith(YOUTUBE_DOMAIN)
        if target.host != source.host and not on_youtube:
            _LOGGER.debug(f'Not following redirect to {target}')
            return None

        return str(target)

    def fetch_page(self, url: str) -> str:
        '''
        Fetches a page that an extractor needs

        :param url: the URL of the page
        :returns: the body of the page
        :raises: InvalidUrl if the page could not be fetched or was empty
        '''

        try:
            body: str | None = self.get(url)
        except RequestError as exc:
            raise InvalidUrl(f'Failed to fetch {url}: {exc}') from exc

        if not body:
            raise InvalidUrl(f'No page data for {url}')

        return body
