"""Immutable build-tool invocations.

A CommandLine is an ordered tuple of goals, profiles and arguments. Composition
never mutates: ``and_`` and ``and_if`` return new values, so an invocation can
be built up and inspected in tests without executing anything.

Usage:
    command = CommandLine.of(CLEAN, DEPLOY, profile("ci", "release")).and_if(
        project.skip_tests, SKIP_TESTS
    )
    command.to_args()  # ["clean", "deploy", "-Pci,release", "-DskipTests"]
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, replace

__all__ = [
    "Argument",
    "CommandLine",
    "Goal",
    "Profile",
    "Token",
    "arg",
    "goal",
    "profile",
    "settings_xml",
    "BATCH_MODE",
    "CLEAN",
    "DEPLOY",
    "INSTALL",
    "SKIP_TESTS",
    "VALIDATE",
    "VERIFY",
]

_MASK = "*****"


@dataclass(frozen=True, slots=True)
class Goal:
    name: str

    def tokens(self) -> tuple[str, ...]:
        return (self.name,)

    def render(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class Profile:
    names: tuple[str, ...]

    def tokens(self) -> tuple[str, ...]:
        return (f"-P{','.join(self.names)}",)

    def render(self) -> str:
        return self.tokens()[0]


@dataclass(frozen=True, slots=True)
class Argument:
    """An option, either a ``-Dname[=value]`` property or a plain flag like ``-pl``.

    ``quoted`` and ``masked`` only affect how the argument is rendered for
    display; the value handed to the process is always passed through as is.
    """

    name: str
    value: str | None = None
    quoted: bool = False
    masked: bool = False

    @classmethod
    def of(cls, name: str) -> Argument:
        return cls(name)

    def with_value(self, value: object) -> Argument:
        return replace(self, value=str(value), quoted=False)

    def with_quoted_value(self, value: object) -> Argument:
        return replace(self, value=str(value), quoted=True)

    def with_masked_value(self, value: object) -> Argument:
        return replace(self, value=str(value), masked=True)

    @property
    def is_property(self) -> bool:
        return self.name.startswith("-D")

    def tokens(self) -> tuple[str, ...]:
        if self.value is None:
            return (self.name,)
        if self.is_property:
            return (f"{self.name}={self.value}",)
        return (self.name, self.value)

    def render(self) -> str:
        if self.value is None:
            return self.name
        if self.masked:
            shown = _MASK
        elif self.quoted:
            shown = f'"{self.value}"'
        else:
            shown = self.value
        separator = "=" if self.is_property else " "
        return f"{self.name}{separator}{shown}"


Token = Goal | Profile | Argument


@dataclass(frozen=True, slots=True)
class CommandLine:
    parts: tuple[Token, ...] = ()

    @classmethod
    def of(cls, *parts: Token) -> CommandLine:
        return cls(tuple(parts))

    def and_(self, *parts: Token | CommandLine) -> CommandLine:
        """Return a new CommandLine with parts appended in order."""
        added: list[Token] = []
        for part in parts:
            if isinstance(part, CommandLine):
                added.extend(part.parts)
            else:
                added.append(part)
        return CommandLine(self.parts + tuple(added))

    def and_if(
        self,
        condition: bool,
        part: Token | CommandLine | Callable[[], Token | CommandLine],
    ) -> CommandLine:
        """Append part only when condition holds.

        A zero-argument callable is only invoked when condition is true, so it may
        read values that are unset otherwise.
        """
        if not condition:
            return self
        if callable(part) and not isinstance(part, (Goal, Profile, Argument, CommandLine)):
            return self.and_(part())
        return self.and_(part)

    @property
    def goals(self) -> tuple[str, ...]:
        return tuple(p.name for p in self.parts if isinstance(p, Goal))

    def to_args(self) -> list[str]:
        """Tokens as passed to the process, secrets included."""
        return [token for part in self.parts for token in part.tokens()]

    def render(self) -> str:
        """Display form with masked values hidden."""
        return " ".join(part.render() for part in self.parts)

    def __str__(self) -> str:
        return self.render()


def goal(name: str) -> Goal:
    return Goal(name)


def profile(*names: str) -> Profile:
    """Profile activation; ``profile("ci,release")`` and ``profile("ci", "release")`` are equal."""
    split = tuple(n.strip() for name in names for n in name.split(",") if n.strip())
    return Profile(split)


def arg(name: str) -> Argument:
    """A ``-D`` system property argument."""
    return Argument(f"-D{name}")


def settings_xml(path: str) -> Argument:
    return Argument.of("-s").with_value(path)


CLEAN = Goal("clean")
VALIDATE = Goal("validate")
VERIFY = Goal("verify")
INSTALL = Goal("install")
DEPLOY = Goal("deploy")

SKIP_TESTS = arg("skipTests")
BATCH_MODE = Argument.of("-B")
