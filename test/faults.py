# python
"""
Faults module behavioral tests.

Scope
- Validate fault codes and their host normalization through __main__.__codes__.
- Validate the configuration error hierarchy.
- Validate ParseFault options, copy.replace merging and trigger() semantics.
- Validate rich rendering (plain and fancy) and shell-mode exits.
- Validate that HelpRequested is a successful, non-Exception signal.

Conventions
- Test method names follow CamelCase per project convention.
- Rendering is captured with a colorless rich Console writing to a StringIO.
"""
import copy
import io
import sys
import unittest
from unittest import TestCase, mock

from rich.console import Console, Group
from rich.panel import Panel

from argosy import (
    FaultCode,
    ConfigurationError,
    UnknownSettingError,
    InvalidKindError,
    InvalidDefaultError,
    InvalidChoicesError,
    InvalidProcError,
    InvalidNameError,
    ReservedNameError,
    DuplicateNameError,
    DuplicateSwitchError,
    ParseFault,
    UnknownOptionError,
    ExtractionError,
    MissingValueError,
    RejectedValueError,
    MissingPositionalsError,
    HelpRequested,
    trigger,
)


def render(renderable):
    console = Console(file=io.StringIO(), color_system=None, width=200)
    console.print(renderable)
    return console.file.getvalue()


class TestFaultCode(TestCase):

    def testNormalizeDefaultsToNumber(self):
        main = sys.modules["__main__"]
        if hasattr(main, "__codes__"):
            self.skipTest("__main__ defines __codes__")
        self.assertEqual(FaultCode.UNKNOWN_OPTION.normalize(), "11111")

    def testNormalizeUsesHostMapping(self):
        codes = {FaultCode.UNKNOWN_OPTION: "E-UNKNOWN"}
        with mock.patch.object(sys.modules["__main__"], "__codes__", codes, create=True):
            self.assertEqual(FaultCode.UNKNOWN_OPTION.normalize(), "E-UNKNOWN")
            self.assertEqual(FaultCode.MISSING_VALUE.normalize(), "11131")

    def testCodesAreUnique(self):
        self.assertEqual(len({code.value for code in FaultCode}), len(FaultCode))


class TestConfigurationErrors(TestCase):

    def testHierarchy(self):
        for error in (
            UnknownSettingError,
            InvalidKindError,
            InvalidDefaultError,
            InvalidChoicesError,
            InvalidProcError,
            InvalidNameError,
            ReservedNameError,
            DuplicateNameError,
            DuplicateSwitchError,
        ):
            with self.subTest(error=error):
                self.assertTrue(issubclass(error, ConfigurationError))
                self.assertTrue(issubclass(error, ValueError))
                self.assertIsInstance(error.code, FaultCode)

    def testTypeFlavoredErrors(self):
        self.assertTrue(issubclass(InvalidKindError, TypeError))
        self.assertTrue(issubclass(InvalidDefaultError, TypeError))
        self.assertTrue(issubclass(InvalidProcError, TypeError))
        self.assertFalse(issubclass(InvalidChoicesError, TypeError))

    def testConfigurationErrorsAreNotParseFaults(self):
        self.assertFalse(issubclass(ConfigurationError, ParseFault))


class TestParseFault(TestCase):

    def testClassDefaultsInOptions(self):
        fault = UnknownOptionError("unknown option '-x'")
        self.assertEqual(fault.options["code"], FaultCode.UNKNOWN_OPTION)
        self.assertEqual(fault.options["title"], "unknown option")
        self.assertEqual(str(fault), "unknown option '-x'")

    def testTitleStandsInForMissingMessage(self):
        self.assertEqual(str(MissingPositionalsError()), "missing positionals")
        self.assertEqual(str(UnknownOptionError(title="custom")), "custom")

    def testOptionsAreReadOnly(self):
        fault = UnknownOptionError("x", hint="y")
        with self.assertRaises(TypeError):
            fault.options["hint"] = "z"

    def testExtractionFamily(self):
        self.assertTrue(issubclass(MissingValueError, ExtractionError))
        self.assertTrue(issubclass(ExtractionError, ParseFault))
        self.assertTrue(issubclass(ParseFault, Exception))

    def testReplaceMergesOptions(self):
        fault = MissingValueError("no value follows", hint="pass one")
        replaced = copy.replace(fault, index=3)
        self.assertIsInstance(replaced, MissingValueError)
        self.assertIsNot(replaced, fault)
        self.assertEqual(replaced.message, "no value follows")
        self.assertEqual(replaced.options["hint"], "pass one")
        self.assertEqual(replaced.options["index"], 3)
        self.assertNotIn("index", fault.options)

    def testReplaceOverridesMessage(self):
        replaced = copy.replace(MissingValueError("inner"), message="outer: inner")
        self.assertEqual(str(replaced), "outer: inner")
        self.assertNotIn("message", replaced.options)


class TestTrigger(TestCase):

    def testTriggerRaisesACopy(self):
        fault = UnknownOptionError("unknown option '-x'")
        with self.assertRaises(UnknownOptionError) as context:
            trigger(fault, index=1)
        self.assertEqual(context.exception.options["index"], 1)
        self.assertNotIn("index", fault.options)

    def testTriggerChainsTheException(self):
        cause = ValueError("odd")
        with self.assertRaises(RejectedValueError) as context:
            trigger(RejectedValueError("rejected", exception=cause))
        self.assertIs(context.exception.__cause__, cause)

    def testTriggerRequiresAFault(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("plain"))

    def testShellModePrintsAndExits(self):
        fault = UnknownOptionError(
            "unknown option '-x' at first position",
            hint="try 'tool --help'",
            usage="usage: tool",
        )
        with mock.patch("argosy.faults.console", Console(file=io.StringIO(), color_system=None, width=200)) as console:
            with self.assertRaises(SystemExit) as context:
                trigger(fault, shell=True, prog="tool", colorful=False)
        self.assertEqual(context.exception.code, 1)
        output = console.file.getvalue()
        self.assertIn("[ tool — 11111 | Unknown Option ]", output)
        self.assertIn("unknown option '-x' at first position", output)
        self.assertIn("try 'tool --help'", output)
        self.assertIn("usage: tool", output)


class TestRendering(TestCase):

    def testPlainRenderingIsAGroup(self):
        fault = UnknownOptionError("boom", prog="tool")
        self.assertIsInstance(fault.__rich__(), Group)
        self.assertIn("boom", render(fault))

    def testFancyRenderingIsAPanel(self):
        fault = UnknownOptionError("boom", prog="tool", fancy=True)
        self.assertIsInstance(fault.__rich__(), Panel)
        output = render(fault)
        self.assertIn("tool", output)
        self.assertIn("boom", output)

    def testHintIsRendered(self):
        output = render(UnknownOptionError("boom", prog="tool", hint="look here", colorful=False))
        self.assertIn("→ look here", output)


class TestHelpRequested(TestCase):

    def testIsNotAnException(self):
        self.assertTrue(issubclass(HelpRequested, BaseException))
        self.assertFalse(issubclass(HelpRequested, Exception))

    def testTextJoinsUsageAndHelp(self):
        signal = HelpRequested("usage: tool", " optionals:")
        self.assertEqual(str(signal), "usage: tool\n optionals:")

    def testTriggerRaisesOutsideShell(self):
        with self.assertRaises(HelpRequested):
            trigger(HelpRequested("usage: tool", " optionals:"))

    def testShellModePrintsOnStdoutAndExitsWithZero(self):
        with mock.patch("argosy.faults.stdout", Console(file=io.StringIO(), color_system=None, width=200)) as stdout:
            with self.assertRaises(SystemExit) as context:
                trigger(HelpRequested("usage: tool SOURCE", " optionals:"), shell=True)
        self.assertEqual(context.exception.code, 0)
        output = stdout.file.getvalue()
        self.assertIn("usage: tool SOURCE", output)
        self.assertIn("optionals:", output)

    def testFancyHelpIsAPanel(self):
        signal = HelpRequested("usage: tool", " optionals:", fancy=True, prog="tool")
        self.assertIsInstance(signal.__rich__(), Panel)


if __name__ == "__main__":
    unittest.main()
