import orthauth as oa
from firelib import exceptions as exc

auth = oa.configure_here('auth-config.py', __name__)


def default_timeout():
    """ seconds a new reference gets to connect and receive headers,
        None means wait forever, which is what requests does by default """
    value = auth.get('timeout')
    if value is None or isinstance(value, str) and value.strip().lower() in ('', 'none'):
        return None

    try:
        seconds = float(value)
    except (TypeError, ValueError) as e:
        raise exc.ConfigurationError(f'timeout must be a number not {value!r}') from e

    if seconds < 0:
        raise exc.ConfigurationError(f'timeout must not be negative {seconds}')

    return seconds
