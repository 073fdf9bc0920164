'''
Named extraction strategies for locating data in the markup of YouTube
pages. Each strategy declares whether its field is required, in which case
a failure to extract it aborts the extraction, or optional, in which case
the default value of the field is returned.

:copyright  : Copyright 2026
:license    : GPLv3
'''

import re

from typing import Callable
from logging import Logger
from logging import getLogger

import orjson

from ..datatypes import FieldPolicy
from ..exceptions import TubeMetaError

_LOGGER: Logger = getLogger(__name__)

# Body of a JSON string literal, honouring escaped quotes
JSON_STRING_BODY: str = r'((?:[^"\\]|\\.)*)'


class PatternStrategy:
    def __init__(self, name: str, pattern: str | re.Pattern[str],
                 policy: FieldPolicy = FieldPolicy.OPTIONAL,
                 group: int = 1,
                 transform: Callable[[str], any] | None = None,
                 default: any = None,
                 error: type[TubeMetaError] = TubeMetaError,
                 flags: int = 0) -> None:
        '''
        Extracts a field from page content using a regular expression

        :param name: name of the field, used in logs and error messages
        :param pattern: the regular expression
        :param policy: whether the field is required or optional
        :param group: the capture group holding the value of the field
        :param transform: applied to the captured text before it is returned
        :param default: value returned for an optional field that was not
        found
        :param error: exception raised when a required field was not found
        :param flags: flags for compiling the pattern
        '''

        self.name: str = name
        if isinstance(pattern, re.Pattern):
            self.regex: re.Pattern[str] = pattern
        else:
            self.regex = re.compile(pattern, flags)

        self.policy: FieldPolicy = policy
        self.group: int = group
        self.transform: Callable[[str], any] | None = transform
        self.default: any = default
        self.error: type[TubeMetaError] = error

    def __repr__(self) -> str:
        return (
            f'{type(self).__name__}(name={self.name}, '
            f'policy={self.policy.value})'
        )

    @property
    def required(self) -> bool:
        return self.policy == FieldPolicy.REQUIRED

    def _missing(self, reason: str) -> any:
        if self.required:
            raise self.error(f'{self.name}: {reason}')

        _LOGGER.debug(f'Using default for {self.name}: {reason}')
        return self.default

    def _convert(self, value: str) -> any:
        if self.transform:
            return self.transform(value)

        return value

    def extract(self, content: str) -> any:
        '''
        Extracts the first non-empty match of the pattern

        :param content: the page content to search
        :returns: the (transformed) value of the field
        :raises: the configured error if the field is required and not found
        '''

        for match in self.regex.finditer(content or ''):
            value: str | None = match.group(self.group)
            if value:
                return self._convert(value)

        return self._missing('no match')

    def extract_all(self, content: str) -> list[any]:
        '''
        Extracts all non-empty matches of the pattern, in the order in
        which they appear in the content

        :param content: the page content to search
        :returns: list of (transformed) values
        :raises: the configured error if the field is required and no match
        was found
        '''

        values: list[any] = [
            self._convert(match.group(self.group))
            for match in self.regex.finditer(content or '')
            if match.group(self.group)
        ]

        if not values:
            missing: any = self._missing('no matches')
            return list(missing or [])

        return values

    def matches(self, content: str) -> bool:
        '''
        Checks whether the pattern occurs in the content
        '''

        found: bool = self.regex.search(content or '') is not None
        if not found and self.required:
            raise self.error(f'{self.name}: no match')

        return found


class JsonFragmentStrategy(PatternStrategy):
    '''
    Extracts an embedded JSON fragment and decodes it
    '''

    def __init__(self, name: str, pattern: str | re.Pattern[str],
                 policy: FieldPolicy = FieldPolicy.OPTIONAL,
                 group: int = 1,
                 wrap: str = '{}',
                 default: any = None,
                 error: type[TubeMetaError] = TubeMetaError,
                 decode_error: type[TubeMetaError] | None = None,
                 flags: int = 0) -> None:
        '''
        :param wrap: the captured text is placed between the two characters
        of wrap before decoding, use '' when the capture includes the
        enclosing braces
        :param decode_error: exception raised when a required fragment was
        found but could not be decoded, defaults to error
        '''

        super().__init__(
            name, pattern, policy=policy, group=group, default=default,
            error=error, flags=flags
        )
        self.wrap: str = wrap
        self.decode_error: type[TubeMetaError] = decode_error or error

    def _convert(self, value: str) -> any:
        if self.wrap:
            value = f'{self.wrap[0]}{value}{self.wrap[1]}'

        try:
            data: any = orjson.loads(value)
        except orjson.JSONDecodeError as exc:
            if self.required:
                raise self.decode_error(
                    f'{self.name}: failed to decode fragment: {exc}'
                ) from exc

            _LOGGER.debug(f'Failed to decode {self.name}: {exc}')
            return self.default

        if not isinstance(data, dict):
            if self.required:
                raise self.decode_error(
                    f'{self.name}: expected an object but got {type(data)}'
                )

            _LOGGER.debug(f'Fragment {self.name} is not an object')
            return self.default

        return data
