from rich.pretty import pprint

from cmdparse import *

registry = Registry("copy files somewhere else", prog="tool")
registry.flag("-v", "--verbose", repeatable=True, descr="print more details (repeat for more)")
registry.option("-o", "--output", metavar="FILE", descr="where to write the result")
registry.option("-I", "--include", metavar="DIR", repeatable=True, descr="add a search directory")
registry.option("-c", "--color", optional=True, metavar="WHEN", descr="colorize the output")

remote = registry.command("remote", "manage remote locations")
remote.flag("-f", "--force", descr="overwrite an existing remote")


if __name__ == '__main__':
    pprint(registry.parse(["-vv", "-o", "out.txt", "-I", "a", "-I=b", "--color", "src", "--", "-x"]))
    pprint(registry.parse("remote -f origin"))
    print_usage(registry)
