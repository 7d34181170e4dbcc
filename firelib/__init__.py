from firelib import exceptions as exc
from firelib.auth import AuthTokenStore
from firelib.core import (Transport,
                          REDIRECT_LIMIT,
                          redirect_preserve_headers,)
from firelib.reference import Reference


def reference(url, transport=None, **kwargs):
    """ a new Reference for url, the usual entry point """
    return Reference(url, transport=transport, **kwargs)


__version__ = '0.0.1.dev0'
