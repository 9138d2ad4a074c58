from rich.pretty import pprint

from argbind import *


def paint(*params):
    return bind_arguments(params, {"height": "number", "color": ["red"], "coords": "array"})


if __name__ == '__main__':
    pprint(paint([3, 5, 3], 22))
    pprint(bind_arguments(({}, {}, True, {}, {}), [{"deep": "bool"}, {"*": "obj:object"}]))
