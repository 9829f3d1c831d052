"""echodns: synthetic name resolution mapping every IPv4 address to a canonical host name."""

from .codec import Codec, decode, encode
from .config.config_model import ResolverConfiguration
from .errors import ConfigurationError, EchoDnsError, UnknownHostError
from .resolver import EchoResolver, HostAddress

__all__ = [
    "Codec",
    "ConfigurationError",
    "EchoDnsError",
    "EchoResolver",
    "HostAddress",
    "ResolverConfiguration",
    "UnknownHostError",
    "decode",
    "encode",
]
