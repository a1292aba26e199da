from rich.pretty import pprint

from argyle import *

parser = ArgumentParser(
    AppInfo("copy", "Copy files into a destination directory", (1, 2, 0)),
    (
        OptionSpec("force", long="--force", short="-f", descr="Overwrite existing files"),
        OptionSpec("mode", long="--mode", short="-m", metavar="MODE", arity=1, default=("fast",), choices=("fast", "safe")),
        OptionSpec("quiet", long="--quiet", short="-q", conflicts=("verbose",)),
        OptionSpec("verbose", long="--verbose", short="-v", conflicts=("quiet",)),
    ),
    (
        PositionalSpec("destination", metavar="DEST", descr="Target directory"),
        PositionalSpec("sources", metavar="SOURCE", descr="Files to copy", capture=True),
    ),
    shell=True,
)


if __name__ == '__main__':
    with parser.parse_args() as result:
        pprint(result)
