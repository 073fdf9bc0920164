'''
Datatypes and Enums used across the tubemeta package.
'''

from enum import Enum


class ChannelIdentifierType(str, Enum):
    # flake8: noqa: E201
    CANONICAL =     'canonical'
    CUSTOM_URL =    'custom_url'
    HANDLE =        'handle'
    INVALID =       'invalid'


class VideoIdentifierType(str, Enum):
    SHORT_LINK = 'short_link'
    QUERY = 'query'
    BARE = 'bare'
    INVALID = 'invalid'


class FieldPolicy(str, Enum):
    '''
    Whether failing to extract a field aborts the extraction or yields
    the default value of the field
    '''

    REQUIRED = 'required'
    OPTIONAL = 'optional'
