"""
LangLink Service Exceptions

Custom exceptions shared by the resilience layer.
"""


class LangLinkError(Exception):
    """Base exception for LangLink service errors"""
    pass


class ProviderError(LangLinkError):
    """Raised when a remote provider call failed or returned unusable data"""
    pass


class NetworkUnavailableError(LangLinkError):
    """Raised when a remote call is short-circuited because the device is offline"""
    pass


class UnsupportedCapabilityError(LangLinkError):
    """Raised when the runtime lacks a capability (e.g. on-device synthesis)"""
    pass


class StorageError(LangLinkError):
    """Raised when the durable store cannot be read or written"""
    pass


class PlaybackBusyError(LangLinkError):
    """Raised when playback is requested while another playback is active"""
    pass


class PlaybackError(LangLinkError):
    """Raised when the on-device synthesis engine fails mid-playback"""
    pass
