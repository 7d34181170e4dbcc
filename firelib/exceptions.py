class FirelibError(Exception):
    """ base class for firelib errors """


class LocalError(FirelibError):
    """ Something went wrong locally and we can do something about it. """


class ConfigurationError(LocalError):
    """ Something went wrong with local configuration. """


class MalformedURLError(LocalError):
    """ The url stored on a reference cannot be split into
        a scheme and a host, so there is nothing to re-root. """


class SerializationError(LocalError):
    """ A value could not be encoded for the wire, or what came
        back over the wire was not the shape we were told to expect. """


class CouldNotReachError(FirelibError):
    """ Could not reach a remote. """


class TimeoutError(CouldNotReachError):
    """ The request did not connect and receive headers before its
        deadline ran out. Usually worth retrying with some backoff. """


class TransportError(CouldNotReachError):
    """ Any other failure on the way to the remote, dns, refused
        connections, resets while reading, tls, etc. """


class TooManyRedirectsError(CouldNotReachError):
    """ The remote kept redirecting past the hop limit. """


class RemoteError(FirelibError):
    """ The remote answered with a non 2xx status.

        The message is the raw response body because the
        database puts its own error text there. """

    def __init__(self, message, status_code=None, headers=None):
        super().__init__(message)
        self.status_code = status_code
        self.headers = headers

    @property
    def body(self):
        return self.args[0]
