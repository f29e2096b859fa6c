"""
Targets: which nodes a call is sent to.

Each variant renders to a target expression (tgt) and a matcher name
(expr_form). Variants that salt-ssh's roster matching understands are
marked ssh_capable; only those can be used with the SSH entrypoint.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import ClassVar, Iterable


class Target(ABC):
    """Base class for all target variants."""

    expr_form: ClassVar[str]
    ssh_capable: ClassVar[bool] = False

    @property
    @abstractmethod
    def target(self) -> str:
        ...

    def to_payload(self) -> dict[str, str]:
        return {"tgt": self.target, "expr_form": self.expr_form}


@dataclass(frozen=True)
class Glob(Target):
    """Shell-style glob on minion ids, e.g. "web*"."""

    expression: str = "*"
    expr_form: ClassVar[str] = "glob"
    ssh_capable: ClassVar[bool] = True

    @property
    def target(self) -> str:
        return self.expression


@dataclass(frozen=True, init=False)
class MinionList(Target):
    """Explicit list of minion ids."""

    minions: tuple[str, ...]
    expr_form: ClassVar[str] = "list"
    ssh_capable: ClassVar[bool] = True

    def __init__(self, minions: Iterable[str]):
        object.__setattr__(self, "minions", tuple(minions))

    @property
    def target(self) -> str:
        return ",".join(self.minions)


@dataclass(frozen=True)
class Grains(Target):
    """Match on a grain value, e.g. Grains("os", "SUSE") -> "os:SUSE"."""

    grain: str
    value: str
    delimiter: str = ":"
    expr_form: ClassVar[str] = "grain"
    ssh_capable: ClassVar[bool] = True

    @property
    def target(self) -> str:
        return f"{self.grain}{self.delimiter}{self.value}"


@dataclass(frozen=True)
class GrainsPCRE(Target):
    """Match on a grain value with a regular expression."""

    grain: str
    pattern: str
    delimiter: str = ":"
    expr_form: ClassVar[str] = "grain_pcre"

    @property
    def target(self) -> str:
        return f"{self.grain}{self.delimiter}{self.pattern}"


@dataclass(frozen=True)
class Pillar(Target):
    """Match on a pillar value."""

    key: str
    value: str
    delimiter: str = ":"
    expr_form: ClassVar[str] = "pillar"

    @property
    def target(self) -> str:
        return f"{self.key}{self.delimiter}{self.value}"


@dataclass(frozen=True)
class PillarPCRE(Target):
    """Match on a pillar value with a regular expression."""

    key: str
    pattern: str
    delimiter: str = ":"
    expr_form: ClassVar[str] = "pillar_pcre"

    @property
    def target(self) -> str:
        return f"{self.key}{self.delimiter}{self.pattern}"


@dataclass(frozen=True)
class PCRE(Target):
    """Regular expression on minion ids."""

    pattern: str
    expr_form: ClassVar[str] = "pcre"
    ssh_capable: ClassVar[bool] = True

    @property
    def target(self) -> str:
        return self.pattern


@dataclass(frozen=True)
class Compound(Target):
    """Compound matcher expression, e.g. "G@os:Ubuntu and web*"."""

    expression: str
    expr_form: ClassVar[str] = "compound"

    @property
    def target(self) -> str:
        return self.expression


@dataclass(frozen=True)
class NodeGroup(Target):
    """Node group defined in the master configuration."""

    name: str
    expr_form: ClassVar[str] = "nodegroup"
    ssh_capable: ClassVar[bool] = True

    @property
    def target(self) -> str:
        return self.name


@dataclass(frozen=True)
class Range(Target):
    """SECO range expression."""

    expression: str
    expr_form: ClassVar[str] = "range"
    ssh_capable: ClassVar[bool] = True

    @property
    def target(self) -> str:
        return self.expression


@dataclass(frozen=True)
class IPCIDR(Target):
    """Subnet or single address, e.g. "10.0.0.0/24"."""

    cidr: str
    expr_form: ClassVar[str] = "ipcidr"
    ssh_capable: ClassVar[bool] = True

    @property
    def target(self) -> str:
        return self.cidr
