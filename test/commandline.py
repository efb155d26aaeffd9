"""
Command-line parsing tests (tokenizing, locating, binding, bundles).

Scope
- Validate quote handling and unterminated quotes.
- Validate positional, named ("--name value", "--name=value", "-n value")
  and flag-style binding, including the Boolean fallback.
- Validate failures for unknown, duplicate, extra and missing arguments.
- Validate lazy defaults and typed bundle accessors.

Conventions
- Test method names follow CamelCase per project convention.
- Tests use the public API (parse, tokenize, CommandLine).
"""
import unittest
from unittest import TestCase

from conch import (
    ArgumentBundle,
    ArgumentLookupError,
    ArgumentTypeError,
    Boolean,
    CommandLine,
    Directory,
    Double,
    ErrorKind,
    Integer,
    String,
    parse,
    tokenize,
)


def noop(arguments, output):
    pass


class TestTokenize(TestCase):
    """Splitting lines into tokens."""

    def testWhitespaceSeparatesTokens(self):
        self.assertEqual(tokenize("a  b\tc").value, ["a", "b", "c"])

    def testQuotedTextKeepsWhitespace(self):
        self.assertEqual(tokenize('echo "hello world"').value, ["echo", "hello world"])
        self.assertEqual(tokenize("echo 'hello world'").value, ["echo", "hello world"])

    def testEmptyQuotesAreAnEmptyToken(self):
        self.assertEqual(tokenize("say ''").value, ["say", ""])

    def testOtherQuoteIsLiteralInsideQuotes(self):
        self.assertEqual(tokenize('say "it\'s"').value, ["say", "it's"])

    def testUnterminatedQuote(self):
        result = tokenize('echo "oops')
        self.assertIs(result.kind, ErrorKind.UNTERMINATED_QUOTE)

    def testEmptyLine(self):
        self.assertEqual(tokenize("").value, [])
        self.assertEqual(tokenize("   ").value, [])

    def testCustomQuotes(self):
        self.assertEqual(tokenize("say 'a b'", quotes='"').value, ["say", "'a", "b'"])

    def testAssistAppendsEmptyToken(self):
        self.assertEqual(CommandLine.for_assist("echo ").value.elements, ("echo", ""))
        self.assertEqual(CommandLine.for_assist("").value.elements, ("",))
        self.assertEqual(CommandLine.for_assist("ec").value.elements, ("ec",))
        self.assertEqual(CommandLine.for_execute("echo a").value.arguments, ("a",))


class TestParse(TestCase):
    """Binding tokens to parameters."""

    def setUp(self):
        self.defaults = iter(range(100))
        self.root = Directory("root")
        self.echo = self.root.command(noop, String("text"), name="echo")
        self.repeat = self.root.command(
            noop,
            String("text"),
            Integer("times", short="n", default=1),
            name="repeat",
        )
        lib = self.root.directory("lib")
        self.build = lib.command(
            noop,
            Boolean("verbose", default=False),
            String("target", default="all"),
            name="build",
        )
        self.add = self.root.directory("math").command(noop, Double("left"), Double("right"), name="add")
        self.tick = self.root.command(noop, Integer("count", supplier=lambda: next(self.defaults)), name="tick")

    def bundle(self, line):
        result = parse(line, self.root)
        self.assertTrue(result, getattr(result, "message", ""))
        return dict(result.value[1])

    def testRequiredStringParameter(self):
        command, arguments = parse("echo hello", self.root).value
        self.assertIs(command, self.echo)
        self.assertEqual(dict(arguments), {"text": "hello"})

    def testQuotedValue(self):
        self.assertEqual(self.bundle('echo "hello world"'), {"text": "hello world"})

    def testEveryParameterIsInTheBundle(self):
        self.assertEqual(self.bundle("repeat hi"), {"text": "hi", "times": 1})

    def testNamedForms(self):
        for line in ("repeat hi --times 3", "repeat hi --times=3", "repeat hi -n 3", "repeat hi -times 3", "repeat --times 3 hi"):
            with self.subTest(line=line):
                self.assertEqual(self.bundle(line), {"text": "hi", "times": 3})

    def testPositionalFillsInDeclarationOrder(self):
        self.assertEqual(self.bundle("repeat hi 4"), {"text": "hi", "times": 4})

    def testNegativeNumbersAreValues(self):
        self.assertEqual(self.bundle("repeat hi -5"), {"text": "hi", "times": -5})
        self.assertEqual(self.bundle("math/add -.5 -2"), {"left": -0.5, "right": -2.0})

    def testDashesAreValues(self):
        self.assertEqual(self.bundle("echo -"), {"text": "-"})
        self.assertEqual(self.bundle("echo --"), {"text": "--"})

    def testBooleanFlag(self):
        self.assertEqual(self.bundle("lib/build --verbose"), {"verbose": True, "target": "all"})
        self.assertEqual(self.bundle("lib/build release --verbose"), {"verbose": True, "target": "release"})

    def testBooleanFlagFollowedByOtherValue(self):
        self.assertEqual(self.bundle("lib/build --verbose release"), {"verbose": True, "target": "release"})

    def testBooleanFlagWithExplicitValue(self):
        self.assertEqual(self.bundle("lib/build --verbose false release"), {"verbose": False, "target": "release"})
        self.assertEqual(self.bundle("lib/build --verbose=true"), {"verbose": True, "target": "all"})

    def testDefaultsAreComputedAtParseTime(self):
        self.assertEqual(self.bundle("tick"), {"count": 0})
        self.assertEqual(self.bundle("tick"), {"count": 1})
        self.assertEqual(self.bundle("tick 9"), {"count": 9})

    def testUnknownPath(self):
        result = parse("unknown/build", self.root)
        self.assertIs(result.kind, ErrorKind.ENTRY_NOT_FOUND)
        self.assertEqual(result.input, "unknown")

    def testDirectoryIsNotACommand(self):
        self.assertIs(parse("lib extra args", self.root).kind, ErrorKind.NOT_A_COMMAND)
        self.assertIs(parse("lib", self.root).kind, ErrorKind.NOT_A_COMMAND)

    def testEmptyLineIsNotACommand(self):
        self.assertIs(parse("", self.root).kind, ErrorKind.NOT_A_COMMAND)

    def testMissingRequiredParameter(self):
        result = parse("repeat", self.root)
        self.assertIs(result.kind, ErrorKind.MISSING_REQUIRED_PARAM)
        self.assertEqual(result.input, "text")

    def testExtraArgument(self):
        result = parse("repeat hi 3 extra", self.root)
        self.assertIs(result.kind, ErrorKind.UNEXPECTED_ARGUMENT)
        self.assertEqual(result.input, "extra")

    def testUnknownParameterName(self):
        result = parse("repeat hi --tims 3", self.root)
        self.assertIs(result.kind, ErrorKind.UNEXPECTED_ARGUMENT)
        self.assertEqual(result.input, "--tims")
        self.assertIn("--times", result.options["suggestions"])

    def testDuplicateNamedParameter(self):
        result = parse("repeat hi --times 1 --times 2", self.root)
        self.assertIs(result.kind, ErrorKind.UNEXPECTED_ARGUMENT)

    def testPositionalSkipsNamedParameters(self):
        self.assertEqual(self.bundle("repeat --text hi 4"), {"text": "hi", "times": 4})
        self.assertIs(parse("repeat --text hi there", self.root).kind, ErrorKind.INVALID_PARAM_VALUE)

    def testInvalidValue(self):
        result = parse("repeat hi --times x", self.root)
        self.assertIs(result.kind, ErrorKind.INVALID_PARAM_VALUE)
        self.assertEqual(result.input, "x")

    def testNumericSuffixIsRejected(self):
        self.assertIs(parse("math/add 1 100a11", self.root).kind, ErrorKind.INVALID_PARAM_VALUE)

    def testIntegerOutOfRangeIsInvalid(self):
        for token in ("99999999999999999999999", "1" * 5000):
            with self.subTest(digits=len(token)):
                result = parse("tick " + token, self.root)
                self.assertIs(result.kind, ErrorKind.INVALID_PARAM_VALUE)
                self.assertIn("out of range", result.message)

    def testNullableParameters(self):
        self.root.command(noop, Integer("limit", nullable=True), Boolean("strict", default=True, nullable=True), name="cap")
        self.assertEqual(self.bundle("cap null"), {"limit": None, "strict": True})
        self.assertEqual(self.bundle("cap 3 --strict null"), {"limit": 3, "strict": None})
        self.assertEqual(self.bundle("cap null --strict"), {"limit": None, "strict": False})
        self.assertIs(parse("repeat hi null", self.root).kind, ErrorKind.INVALID_PARAM_VALUE)

    def testNamedParameterWithoutValue(self):
        self.assertIs(parse("repeat hi --times", self.root).kind, ErrorKind.INVALID_PARAM_VALUE)

    def testUnterminatedQuote(self):
        self.assertIs(parse('echo "hi', self.root).kind, ErrorKind.UNTERMINATED_QUOTE)

    def testSystemDirectoryIsConsultedFirst(self):
        system = Directory("system")
        pwd = system.command(noop, name="pwd")
        self.assertIs(parse("pwd", self.root, system=system).value[0], pwd)
        self.assertIs(parse("/echo hi", self.root, system=system).value[0], self.echo)

    def testCustomSeparator(self):
        command, arguments = parse("math:add 1 2", self.root, separator=":").value
        self.assertIs(command, self.add)


class TestArgumentBundle(TestCase):
    """Typed accessors over parsed values."""

    def setUp(self):
        self.directory = Directory("root")
        self.arguments = ArgumentBundle({
            "text": "hi",
            "count": 3,
            "ratio": 0.5,
            "flag": True,
            "where": self.directory,
        })

    def testTypedAccessors(self):
        self.assertEqual(self.arguments.string("text"), "hi")
        self.assertEqual(self.arguments.integer("count"), 3)
        self.assertEqual(self.arguments.double("ratio"), 0.5)
        self.assertIs(self.arguments.boolean("flag"), True)
        self.assertIs(self.arguments.directory("where"), self.directory)

    def testWrongKindRaises(self):
        with self.assertRaises(ArgumentTypeError):
            self.arguments.integer("text")
        with self.assertRaises(ArgumentTypeError):
            self.arguments.integer("flag")
        with self.assertRaises(ArgumentTypeError):
            self.arguments.command("where")

    def testMissingNameRaises(self):
        with self.assertRaises(ArgumentLookupError):
            self.arguments.string("missing")
        self.assertIsNone(self.arguments.get("missing"))
        self.assertNotIn("missing", self.arguments)

    def testNoneIsHandedOutByEveryAccessor(self):
        arguments = ArgumentBundle({"limit": None})
        for accessor in (arguments.string, arguments.integer, arguments.double, arguments.boolean, arguments.directory):
            with self.subTest(accessor=accessor.__name__):
                self.assertIsNone(accessor("limit"))

    def testMappingProtocol(self):
        self.assertEqual(len(self.arguments), 5)
        self.assertEqual(self.arguments["count"], 3)


if __name__ == "__main__":
    unittest.main()
