""" Query modifiers understood by the realtime database REST api.

Ordering and filtering return a new reference so that a base reference
can be reused for many different queries, shallow and include_priority
change how the current reference reads and are set in place. """

import json

# query parameter names
authParam = 'auth'
shallowParam = 'shallow'
formatParam = 'format'
formatVal = 'export'
orderByParam = 'orderBy'
limitToFirstParam = 'limitToFirst'
limitToLastParam = 'limitToLast'
startAtParam = 'startAt'
endAtParam = 'endAt'
equalToParam = 'equalTo'


def _check_limit(limit):
    # bool is an int, but limitToFirst=True is not a thing
    if isinstance(limit, bool) or not isinstance(limit, int) or limit < 0:
        raise ValueError(f'limit must be a non-negative integer not {limit!r}')


def _check_bound(name, value):
    if value is None:
        raise ValueError(f'{name} value must not be None')

    return json.dumps(value)


class Query:
    """ Mixin for Reference, needs _copy, _set_param and _del_param """

    def shallow(self, flag=True):
        """ only fetch the keys at this level, values are replaced by true """
        if flag:
            self._set_param(shallowParam, 'true')
        else:
            self._del_param(shallowParam)

    def include_priority(self, flag=True):
        """ ask for .priority and .value alongside the data """
        if flag:
            self._set_param(formatParam, formatVal)
        else:
            self._del_param(formatParam)

    def _derive(self, key, value):
        c = self._copy()
        c._set_param(key, value)
        return c

    def order_by(self, key):
        """ order by a child key, or one of $key $value $priority """
        if not key or not isinstance(key, str):
            raise ValueError(f'order_by key must be a non-empty string not {key!r}')

        return self._derive(orderByParam, json.dumps(key))

    def limit_to_first(self, limit):
        _check_limit(limit)
        return self._derive(limitToFirstParam, str(limit))

    def limit_to_last(self, limit):
        _check_limit(limit)
        return self._derive(limitToLastParam, str(limit))

    def start_at(self, value):
        return self._derive(startAtParam, _check_bound('start_at', value))

    def end_at(self, value):
        return self._derive(endAtParam, _check_bound('end_at', value))

    def equal_to(self, value):
        return self._derive(equalToParam, _check_bound('equal_to', value))
