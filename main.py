import logging
import readline

from conch import *

__prog__ = "conch-demo"

root = Directory("root", "demo namespace")
settings = {"verbose": False}


@root.command(
    String("text", descr="text to print"),
    Integer("times", descr="how many times", short="n", default=1),
)
def echo(arguments, output):
    """print some text"""
    for _ in range(arguments.integer("times")):
        output.write(arguments.string("text"))


math = root.directory("math", "arithmetic")


@math.command(Double("left"), Double("right"))
def add(arguments, output):
    """add two numbers"""
    output.write(str(arguments.double("left") + arguments.double("right")))


@math.command(Double("left"), Double("right"))
def div(arguments, output):
    """divide two numbers"""
    output.write(str(arguments.double("left") / arguments.double("right")))


root.directory("settings").toggle(
    "verbose",
    lambda: settings["verbose"],
    lambda value: settings.__setitem__("verbose", value),
)


class Completer:
    def __init__(self, shell):
        self.shell = shell
        self.options = []

    def complete(self, text, state):
        if state == 0:
            self.options = []
            result = autocomplete(readline.get_line_buffer(), self.shell.working, system=self.shell.system)
            if result:
                head = text[:len(text) - len(result.value.prefix)]
                self.options = [
                    head + candidate + (SEPARATOR if kind is CandidateKind.DIRECTORY else "")
                    for candidate, kind in sorted(result.value.kinds.items())
                ]
        if state < len(self.options):
            return self.options[state]
        return None


def main():
    logging.basicConfig(level=logging.WARNING, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    shell = Shell(root, fancy=True, colorful=True, welcome="conch demo; tab completes, ctrl-d quits")
    completer = Completer(shell)
    readline.set_completer_delims(" \t")
    readline.set_completer(completer.complete)
    readline.parse_and_bind("tab: complete")
    while True:
        try:
            line = input("%s> " % shell.working.pathname())
        except EOFError:
            print()
            break
        except KeyboardInterrupt:
            print()
            continue
        shell.execute(line)


if __name__ == '__main__':
    main()
