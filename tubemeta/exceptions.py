'''
Exceptions raised while resolving YouTube channels and videos

:copyright  : Copyright 2026
:license    : GPLv3
'''


class TubeMetaError(ValueError):
    pass


class InvalidIdentifier(TubeMetaError):
    '''
    The channel identifier is not a channel ID, custom URL or handle
    '''


class InvalidUrl(TubeMetaError):
    '''
    The page could not be fetched or a required fragment of it could not
    be decoded
    '''


class ChannelNotFound(TubeMetaError):
    pass


class StreamNotFound(TubeMetaError):
    pass


class InvalidVideoId(TubeMetaError):
    pass
