from firelib.utils import ReaderWriterLock


class AuthTokenStore:
    """ One token, many references.

        Bind the same store to every reference that acts for an
        account and rotating the token is a single call to set. """

    def __init__(self, token=''):
        self._lock = ReaderWriterLock()
        self._token = token

    def set(self, token):
        """ replace the token used to authenticate to the database """
        with self._lock.write_locked():
            self._token = token

    def get(self):
        """ the token currently used to authenticate to the database """
        with self._lock.read_locked():
            return self._token

    def __repr__(self):
        # never print the token
        return f'{self.__class__.__name__}(***)'
