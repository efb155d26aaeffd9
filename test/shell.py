"""
Shell tests (execution, failure reports, built-ins, history, completion).

Scope
- Validate that executor output and failure reports reach their sinks.
- Validate the built-in cd, ls, man and pwd commands.
- Validate bounded history navigation.
- Validate line completion through the shell.

Conventions
- Test method names follow CamelCase per project convention.
- Shells write to BufferOutput sinks so tests can read what was printed.
"""
import unittest
from unittest import TestCase

from conch import (
    BufferOutput,
    CommandLineHistory,
    Directory,
    ErrorKind,
    Integer,
    Shell,
    String,
)


class ShellTestCase(TestCase):
    def setUp(self):
        self.state = {"verbose": False}
        self.root = Directory("root")
        self.lib = self.root.directory("lib", "libraries")

        @self.root.command(String("text", descr="text to print"), Integer("times", short="n", default=1))
        def echo(arguments, output):
            """print some text"""
            for _ in range(arguments.integer("times")):
                output.write(arguments.string("text"))

        @self.lib.command
        def build(arguments, output):
            raise RuntimeError("compiler not found")

        self.root.command(lambda arguments, output: None, name="list")
        self.root.toggle(
            "verbose",
            lambda: self.state["verbose"],
            lambda value: self.state.__setitem__("verbose", value),
        )
        self.output = BufferOutput()
        self.errors = BufferOutput()
        self.shell = Shell(self.root, self.output, self.errors)


class TestExecute(ShellTestCase):
    def testOutputReachesSink(self):
        self.assertTrue(self.shell.execute("echo hello --times 2"))
        self.assertEqual(self.output.lines, ["hello", "hello"])
        self.assertEqual(self.errors.lines, [])

    def testBlankLineDoesNothing(self):
        self.assertTrue(self.shell.execute("   "))
        self.assertEqual(len(self.shell.history), 0)
        self.assertEqual(self.errors.lines, [])

    def testParseFailureIsReported(self):
        result = self.shell.execute("nope")
        self.assertIs(result.kind, ErrorKind.ENTRY_NOT_FOUND)
        report = self.errors.getvalue()
        self.assertIn("11101", report)
        self.assertIn("Entry Not Found", report)
        self.assertIn("'nope'", report)

    def testExecutionFailureIsReported(self):
        result = self.shell.execute("lib/build")
        self.assertIs(result.kind, ErrorKind.EXECUTION_ERROR)
        self.assertIn("compiler not found", self.errors.getvalue())

    def testFancyReportStillHoldsMessage(self):
        shell = Shell(self.root, self.output, self.errors, fancy=True)
        shell.execute("nope")
        self.assertIn("'nope'", self.errors.getvalue())

    def testPlainReportHasNoEscapeSequences(self):
        self.shell.execute("nope")
        self.assertNotIn("\x1b[", self.errors.getvalue())

    def testColorfulReportIsStyled(self):
        shell = Shell(self.root, self.output, self.errors, colorful=True)
        shell.execute("nope")
        self.assertIn("\x1b[", self.errors.getvalue())

    def testToggleFlipsHostState(self):
        self.shell.execute("verbose")
        self.assertTrue(self.state["verbose"])
        self.shell.execute("verbose")
        self.assertFalse(self.state["verbose"])
        self.assertEqual(self.output.lines, ["verbose: on", "verbose: off"])

    def testLinesAreRecorded(self):
        self.shell.execute("echo a")
        self.shell.execute("nope")
        self.assertEqual(self.shell.history.lines, ("echo a", "nope"))

    def testWelcome(self):
        output = BufferOutput()
        Shell(self.root, output, self.errors, welcome="hello there")
        self.assertEqual(output.lines, ["hello there"])


class TestBuiltins(ShellTestCase):
    def testCdAndPwd(self):
        self.assertTrue(self.shell.execute("cd lib"))
        self.assertIs(self.shell.working, self.lib)
        self.shell.execute("pwd")
        self.shell.execute("cd ..")
        self.shell.execute("pwd")
        self.assertEqual(self.output.lines, ["/lib", "/"])

    def testCdIntoCommandFails(self):
        self.assertIs(self.shell.execute("cd echo").kind, ErrorKind.INVALID_PARAM_VALUE)
        self.assertIs(self.shell.working, self.root)

    def testRelativePathsFollowWorkingDirectory(self):
        self.shell.execute("cd lib")
        self.assertIs(self.shell.execute("echo hi").kind, ErrorKind.ENTRY_NOT_FOUND)
        self.assertTrue(self.shell.execute("../echo hi"))
        self.assertTrue(self.shell.execute("/echo hi"))

    def testLs(self):
        self.shell.execute("ls")
        listing = self.output.getvalue()
        for name in ("lib/", "echo", "list", "verbose"):
            self.assertIn(name, listing)
        self.assertNotIn("build", listing)

    def testLsRecursive(self):
        self.shell.execute("ls -r")
        self.assertIn("build", self.output.getvalue())

    def testLsOtherDirectory(self):
        self.shell.execute("ls lib")
        self.assertIn("build", self.output.getvalue())
        self.assertNotIn("echo", self.output.getvalue())

    def testMan(self):
        self.shell.execute("man echo")
        manual = self.output.getvalue()
        self.assertIn("usage: echo {text: string} [times: integer]", manual)
        self.assertIn("print some text", manual)
        self.assertIn("--times, -n", manual)

    def testNamespaceShadowedByBuiltins(self):
        self.assertIsNotNone(self.shell.system.get("pwd"))

    def testBuiltinsCanBeDisabled(self):
        shell = Shell(self.root, self.output, self.errors, system=False)
        self.assertIsNone(shell.system)
        self.assertIs(shell.execute("pwd").kind, ErrorKind.ENTRY_NOT_FOUND)

    def testWorkingDirectoryMustBelongToNamespace(self):
        with self.assertRaises(ValueError):
            self.shell.working = Directory("elsewhere")


class TestComplete(ShellTestCase):
    def testUniqueCommandGetsSpace(self):
        self.assertEqual(self.shell.complete("ec"), "echo ")

    def testUniqueDirectoryGetsSeparator(self):
        self.assertEqual(self.shell.complete("lib"), "lib/")

    def testSharedPrefixListsCandidates(self):
        self.assertEqual(self.shell.complete("l"), "l")
        for candidate in ("lib/", "list", "ls"):
            self.assertIn(candidate, self.output.getvalue())
        self.assertEqual(self.shell.complete("li"), "li")

    def testNoMatchLeavesLineAlone(self):
        self.assertEqual(self.shell.complete("xyz"), "xyz")
        self.assertEqual(self.errors.lines, [])

    def testParameterCompletion(self):
        self.assertEqual(self.shell.complete("echo hi --ti"), "echo hi --times ")
        self.assertEqual(self.shell.complete("verbose t"), "verbose true ")

    def testBrokenLineIsReported(self):
        self.assertEqual(self.shell.complete("nope "), "nope ")
        self.assertIn("'nope'", self.errors.getvalue())


class TestHistory(TestCase):
    def testNavigation(self):
        history = CommandLineHistory()
        self.assertIsNone(history.previous())
        for line in ("one", "two", "three"):
            history.push(line)
        self.assertEqual(history.previous(), "three")
        self.assertEqual(history.previous(), "two")
        self.assertEqual(history.previous(), "one")
        self.assertEqual(history.previous(), "one")
        self.assertEqual(history.next(), "two")
        self.assertEqual(history.next(), "three")
        self.assertIsNone(history.next())

    def testPushResetsCursor(self):
        history = CommandLineHistory()
        history.push("one")
        history.push("two")
        history.previous()
        history.previous()
        history.push("three")
        self.assertEqual(history.previous(), "three")

    def testCapacityIsBounded(self):
        history = CommandLineHistory(2)
        for line in ("one", "two", "three"):
            history.push(line)
        self.assertEqual(history.lines, ("two", "three"))

    def testInvalidCapacity(self):
        with self.assertRaises(ValueError):
            CommandLineHistory(0)
        with self.assertRaises(TypeError):
            CommandLineHistory("30")


if __name__ == "__main__":
    unittest.main()
