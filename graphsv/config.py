import argparse

from .constants import cast_boolean, float_fraction


class CustomHelpFormatter(argparse.ArgumentDefaultsHelpFormatter):
    """
    subclass the default help formatter to stop default printing for required arguments
    """

    def _format_args(self, action, default_metavar):
        if action.metavar is None:
            action.metavar = get_metavar(action.type)
        return super(CustomHelpFormatter, self)._format_args(action, default_metavar)

    def _get_help_string(self, action):
        if action.required:
            return action.help
        return super(CustomHelpFormatter, self)._get_help_string(action)

    def add_arguments(self, actions):
        # sort the arguments alphanumerically so they print in the help that way
        actions = sorted(actions, key=lambda x: getattr(x, 'option_strings'))
        super(CustomHelpFormatter, self).add_arguments(actions)


def get_metavar(arg_type):
    """
    For a given argument type, returns the string to be used for the metavar argument in add_argument

    Example:
        >>> get_metavar(bool)
        '{True,False}'
    """
    if arg_type in [bool, cast_boolean]:
        return '{True,False}'
    elif arg_type in [float_fraction, float]:
        return 'FLOAT'
    elif arg_type == int:
        return 'INT'
    return None


class NullableType:
    def __init__(self, callback_func):
        self.callback_func = callback_func

    def __call__(self, item):
        if str(item).lower() == 'none':
            return None
        return self.callback_func(item)


def augment_parser(namespace, parser):
    """
    add one optional argument per setting of a defaults namespace. The type, default and help are taken
    from the namespace
    """
    for name in namespace.keys():
        cast_type = namespace.type(name)
        if namespace.is_nullable(name):
            cast_type = NullableType(cast_type)
        parser.add_argument(
            '--{}'.format(name),
            default=namespace[name],
            type=cast_type,
            metavar=get_metavar(namespace.type(name)),
            help=namespace.define(name, ''),
        )
    return parser
