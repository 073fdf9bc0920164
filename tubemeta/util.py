'''
Helpers shared by the YouTube extractors
'''

import re

from logging import Logger
from logging import getLogger
from datetime import datetime
from collections.abc import Iterable

import orjson

from dateutil import parser as dateutil_parser

_LOGGER: Logger = getLogger(__name__)

# RFC 3339 date-time: extended format with a mandatory 'Z' or '+hh:mm' offset
RX_RFC3339: re.Pattern[str] = re.compile(
    r'^\d{4}-\d{2}-\d{2}[Tt]\d{2}:\d{2}:\d{2}(?:\.\d+)?'
    r'(?:[Zz]|[+-]\d{2}:\d{2})$'
)


def convert_number_string(number_text: str | int) -> int:
    '''
    Converts a number with optional appendix of m, k, to an integer

    :param number_text: The number as a string, e.g. '1.2M', '3K', '1,500'
    :returns: The number as an integer, e.g. 1200000, 3000, 1500
    :raises ValueError: If the input string is not in a valid format
    '''

    if isinstance(number_text, int):
        return number_text

    if not number_text or not number_text.strip():
        raise ValueError('No number to convert')

    words: list[str] = number_text.strip().split(' ')
    number_text = words[0].strip().replace(',', '')

    multiplier: str = number_text[-1].upper()
    if not multiplier.isnumeric():
        multipliers: dict[str, int] = {
            'K': 1000,
            'M': 1000000,
            'B': 1000000000,
        }
        if multiplier not in multipliers:
            raise ValueError(f'Unknown multiplier in {number_text}')

        count_pre: float = float(number_text[:-1])
        count = int(
            count_pre * multipliers[multiplier]
        )
    else:
        count = int(number_text)

    return count


def remove_duplicates(items: Iterable[str]) -> list[str]:
    '''
    Removes duplicate entries while keeping the order in which the
    entries were first seen

    :param items: the strings to deduplicate
    :returns: list without duplicates
    '''

    seen: set[str] = set()
    result: list[str] = []
    for item in items:
        if item in seen:
            continue

        seen.add(item)
        result.append(item)

    return result


def parse_rfc3339(timestamp: str | None) -> datetime | None:
    '''
    Parses an RFC 3339 timestamp, ie. '2024-05-01T08:00:00-07:00'

    :param timestamp: the text to parse
    :returns: timezone-aware datetime or None if the text is not a valid
    RFC 3339 timestamp
    '''

    if not timestamp:
        return None

    if not RX_RFC3339.fullmatch(timestamp):
        _LOGGER.debug(f'Not an RFC 3339 timestamp: {timestamp}')
        return None

    try:
        value: datetime = dateutil_parser.isoparse(timestamp)
    except (ValueError, OverflowError) as exc:
        _LOGGER.debug(f'Failed to parse timestamp {timestamp}: {exc}')
        return None

    return value


def unescape_json_string(text: str) -> str:
    '''
    Decodes the escapes of text captured from inside a JSON string literal,
    ie. '\\u0026' becomes '&'

    :param text: the captured text, without surrounding quotes
    :returns: the decoded text, or the input if it is not a valid JSON
    string body
    '''

    if '\\' not in text:
        return text

    try:
        return orjson.loads(f'"{text}"')
    except orjson.JSONDecodeError:
        return text


def extract_simple_text(text_obj: dict | str | None) -> str:
    '''
    Extracts simple text from a YouTube text object

    :param text_obj: either a plain string or a dict with 'content',
    'simpleText' or 'runs'
    :return: extracted text or an empty string
    '''

    if not text_obj:
        return ''

    if isinstance(text_obj, str):
        return text_obj

    if not isinstance(text_obj, dict):
        return ''

    if text_obj.get('content'):
        return text_obj['content']

    if text_obj.get('simpleText'):
        return text_obj['simpleText']

    if text_obj.get('runs'):
        return ''.join(run.get('text', '') for run in text_obj['runs'])

    return ''
