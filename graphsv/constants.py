"""
module responsible for small utility functions and constants used throughout the graphsv package
"""
import argparse
import os

PROGNAME = 'graphsv'
EXIT_OK = 0


def cast_boolean(input_value):
    value = str(input_value).lower()
    if value in ['t', 'true', '1', 'y', 'yes', '+']:
        return True
    elif value in ['f', 'false', '0', 'n', 'no', '-']:
        return False
    raise TypeError('casting to boolean failed', input_value)


class GraphsvNamespace:
    """
    Namespace to hold module constants

    Example:
        >>> nspace = GraphsvNamespace(thing=1, otherthing=2)
        >>> nspace.thing
        1
        >>> nspace.otherthing
        2
    """

    def __init__(self, *pos, **kwargs):
        object.__setattr__(self, '_defns', {})
        object.__setattr__(self, '_types', {})
        object.__setattr__(self, '_members', {})
        object.__setattr__(self, '_nullable', set())
        object.__setattr__(self, '_env_overwritable', set())
        object.__setattr__(self, '_env_prefix', 'GRAPHSV')

        for k in pos:
            if k in self._members:
                raise AttributeError('Cannot respecify existing attribute', k, self._members[k])
            self[k] = k

        for attr, val in kwargs.items():
            if attr in self._members:
                raise AttributeError('Cannot respecify existing attribute', attr, self._members[attr])
            self[attr] = val

        for attr, value in self._members.items():
            self._set_type(attr, type(value))

    def __repr__(self):
        return '{}({})'.format(
            self.__class__.__name__, ', '.join(sorted(['{}={}'.format(k, repr(v)) for k, v in self.items()]))
        )

    def get_env_name(self, attr):
        """
        Get the name of the corresponding environment variable

        Example:
            >>> nspace = GraphsvNamespace(a=1)
            >>> nspace.get_env_name('a')
            'GRAPHSV_A'
        """
        if self._env_prefix:
            return '{}_{}'.format(self._env_prefix, attr).upper()
        return attr.upper()

    def get_env_var(self, attr):
        """
        retrieve the environment variable definition of a given attribute
        """
        env = os.environ[self.get_env_name(attr)].strip()
        attr_type = self._types.get(attr, str)

        if attr in self._nullable and env.lower() == 'none':
            return None
        return attr_type(env)

    def is_env_overwritable(self, attr):
        return attr in self._env_overwritable

    def is_nullable(self, attr):
        return attr in self._nullable

    def __getattribute__(self, attr):
        try:
            return object.__getattribute__(self, attr)
        except AttributeError as err:
            variables = object.__getattribute__(self, '_members')
            if attr not in variables:
                raise err
            if self.is_env_overwritable(attr):
                try:
                    return self.get_env_var(attr)
                except KeyError:
                    pass
            return variables[attr]

    def items(self):
        return [(k, self[k]) for k in self.keys()]

    def __getitem__(self, key):
        return getattr(self, key)

    def __setitem__(self, key, val):
        self.__setattr__(key, val)

    def __setattr__(self, attr, val):
        if attr.startswith('_'):
            raise ValueError('cannot set private', attr)
        object.__getattribute__(self, '_members')[attr] = val

    def keys(self):
        return [k for k in self._members]

    def values(self):
        return [self[k] for k in self._members]

    def enforce(self, value):
        """
        checks that the current namespace has a given value

        Returns:
            the input value

        Raises:
            KeyError: the value did not exist

        Example:
            >>> EVENT_TYPE.enforce('DEL')
            'DEL'
        """
        if value not in self.values():
            raise KeyError('value {0} is not a valid member of '.format(repr(value)), self.values())
        return value

    def __iter__(self):
        return iter(self.keys())

    def _set_type(self, attr, cast_type):
        if cast_type == bool:
            self._types[attr] = cast_boolean
        else:
            self._types[attr] = cast_type

    def type(self, attr, *pos):
        """
        returns the cast type of a given attribute
        """
        if len(pos) > 1:
            raise TypeError('too many arguments. type takes a single \'default\' value argument')
        try:
            return self._types[attr]
        except KeyError as err:
            if pos:
                return pos[0]
            raise err

    def define(self, attr, *pos):
        """
        Get the definition of a given attribute or return a default (when given) if the attribute does not exist

        Raises:
            KeyError: the attribute does not exist and a default was not given
        """
        if len(pos) > 1:
            raise TypeError('too many arguments. define takes a single \'default\' value argument')
        try:
            return self._defns[attr]
        except KeyError as err:
            if pos:
                return pos[0]
            raise err

    def add(self, attr, value, defn=None, cast_type=None, nullable=False, env_overwritable=False):
        """
        Add an attribute to the name space

        Args:
            attr (str): name of the attribute being added
            value: the value of the attribute
            defn (str): the definition, used in generating help menus
            cast_type (callable): the function to use in casting the value
            nullable (bool): True if this attribute can have a None value
            env_overwritable (bool): True if this attribute will be overriden by its environment variable equivalent
        """
        if cast_type:
            self._set_type(attr, cast_type)
        else:
            self._set_type(attr, type(value))
        if defn:
            self._defns[attr] = defn

        if nullable:
            self._nullable.add(attr)
        if env_overwritable:
            self._env_overwritable.add(attr)
        self[attr] = value

    def __call__(self, value):
        try:
            return self.enforce(value)
        except KeyError:
            raise TypeError('Invalid value {} for {}. Must be a valid member: {}'.format(
                repr(value), self.__class__.__name__, self.values()))


class WeakGraphsvNamespace(GraphsvNamespace):
    """
    namespace where every attribute may be overridden by its environment variable equivalent
    """

    def is_env_overwritable(self, attr):
        return True


def float_fraction(num):
    """
    cast input to a float

    Args:
        num: input to cast

    Returns:
        float

    Raises:
        TypeError: if the input cannot be cast to a float or the number is not between 0 and 1
    """
    try:
        num = float(num)
    except ValueError:
        raise argparse.ArgumentTypeError('Must be a value between 0 and 1')
    if num < 0 or num > 1:
        raise argparse.ArgumentTypeError('Must be a value between 0 and 1')
    return num


COMPLETE_STAMP = 'GRAPHSV.COMPLETE'
""":class:`str`: Filename for all complete stamp files"""

SUBCOMMAND = GraphsvNamespace(CALL='call')
""":class:`GraphsvNamespace`: holds controlled vocabulary for allowed subcommands"""

EVENT_TYPE = GraphsvNamespace(DEL='DEL', DUP='DUP', INV='INV', DUP_INV='DUP_INV', UR='UR')
""":class:`GraphsvNamespace`: holds controlled vocabulary for called event types

- ``DEL``: deletion
- ``DUP``: duplication
- ``INV``: inversion
- ``DUP_INV``: duplication with an inverted copy
- ``UR``: unresolved, the genotype search was intractable even after repartitioning
"""

SEARCH_STATUS = GraphsvNamespace(SUCCESS='success', TOO_LARGE='too large')
""":class:`GraphsvNamespace`: outcome of a bounded search (haplotype enumeration, genotype enumeration)"""

COLUMNS = GraphsvNamespace(
    event_type='event_type',
    contig='contig',
    start='start',
    end='end',
    group_id='group_id',
    path_id='path_id',
    genotype_id='genotype_id',
    resolved='resolved',
    probability='probability',
    depth_probability='depth_probability',
    evidence_probability='evidence_probability',
    depth_log_likelihood='depth_log_likelihood',
    haplotypes='haplotypes',
    batch_id='batch_id',
)
""":class:`GraphsvNamespace`: Column names for the tabbed output files"""


def sort_columns(input_columns):
    order = {}
    for i, col in enumerate(COLUMNS.values()):
        order[col] = i
    temp = sorted([c for c in input_columns if c in order], key=lambda x: order[x])
    temp = temp + sorted([c for c in input_columns if c not in order])
    return temp


class SearchOutcome:
    """
    result of a bounded search. Either the search succeeded and holds a value, or the search space
    was too large and holds the size that triggered the guard

    Example:
        >>> SearchOutcome.success([1, 2]).value
        [1, 2]
        >>> SearchOutcome.too_large(10 ** 10).is_too_large()
        True
    """

    def __init__(self, status, value=None, size=None):
        self.status = SEARCH_STATUS.enforce(status)
        self.value = value
        self.size = size

    @classmethod
    def success(cls, value):
        return cls(SEARCH_STATUS.SUCCESS, value=value)

    @classmethod
    def too_large(cls, size):
        return cls(SEARCH_STATUS.TOO_LARGE, size=size)

    def is_success(self):
        return self.status == SEARCH_STATUS.SUCCESS

    def is_too_large(self):
        return self.status == SEARCH_STATUS.TOO_LARGE

    def __repr__(self):
        if self.is_success():
            return '{}.success({!r})'.format(self.__class__.__name__, self.value)
        return '{}.too_large({})'.format(self.__class__.__name__, self.size)
