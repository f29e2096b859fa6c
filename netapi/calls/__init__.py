"""
Call descriptors, targets and mode resolution.
"""

from netapi.calls.auth import AuthModule, Credentials, TokenAuth
from netapi.calls.batch import Batch
from netapi.calls.local_call import LocalCall
from netapi.calls.modes import Entrypoint, ExecutionMode, Resolution, resolve
from netapi.calls.ssh import SSHConfig
from netapi.calls.targets import (
    IPCIDR,
    PCRE,
    Compound,
    Glob,
    Grains,
    GrainsPCRE,
    MinionList,
    NodeGroup,
    Pillar,
    PillarPCRE,
    Range,
    Target,
)

__all__ = [
    "AuthModule",
    "Batch",
    "Compound",
    "Credentials",
    "Entrypoint",
    "ExecutionMode",
    "Glob",
    "Grains",
    "GrainsPCRE",
    "IPCIDR",
    "LocalCall",
    "MinionList",
    "NodeGroup",
    "PCRE",
    "Pillar",
    "PillarPCRE",
    "Range",
    "Resolution",
    "SSHConfig",
    "Target",
    "TokenAuth",
    "resolve",
]
