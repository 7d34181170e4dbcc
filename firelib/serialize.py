import json
from firelib import exceptions as exc


def dumps(value):
    """ value -> utf-8 json bytes for a request body """
    try:
        return json.dumps(value).encode()
    except (TypeError, ValueError) as e:
        msg = f'could not encode {type(value).__name__} as json: {e}'
        raise exc.SerializationError(msg) from e


def loads(blob, into=None):
    """ response bytes -> python

        into is called on the decoded value to produce the shape the
        caller wants, e.g. a dataclass, and anything it raises for a
        value of the wrong shape is a SerializationError """
    try:
        value = json.loads(blob)
    except (TypeError, ValueError) as e:  # JSONDecodeError and UnicodeDecodeError are ValueErrors
        raise exc.SerializationError(f'could not decode response: {e}') from e

    if into is None:
        return value

    try:
        return into(value)
    except (TypeError, ValueError, KeyError) as e:
        raise exc.SerializationError(f'could not convert response with {into}: {e}') from e
