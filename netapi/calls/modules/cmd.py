"""
The "cmd" execution module.
"""

from typing import Any

from netapi.calls.local_call import LocalCall


def _kwarg(cwd: str | None, runas: str | None, env: dict[str, str] | None) -> dict[str, Any] | None:
    kwarg: dict[str, Any] = {}
    if cwd is not None:
        kwarg["cwd"] = cwd
    if runas is not None:
        kwarg["runas"] = runas
    if env is not None:
        kwarg["env"] = env
    return kwarg or None


def run(
    command: str,
    cwd: str | None = None,
    runas: str | None = None,
    env: dict[str, str] | None = None,
) -> LocalCall[str]:
    """Run a shell command; each minion returns its combined output."""
    return LocalCall("cmd.run", arg=[command], kwarg=_kwarg(cwd, runas, env), return_type=str)


def retcode(
    command: str,
    cwd: str | None = None,
    runas: str | None = None,
    env: dict[str, str] | None = None,
) -> LocalCall[int]:
    """Run a shell command; each minion returns its exit code."""
    return LocalCall("cmd.retcode", arg=[command], kwarg=_kwarg(cwd, runas, env), return_type=int)


def run_all(command: str, cwd: str | None = None) -> LocalCall[dict[str, Any]]:
    """Run a shell command; each minion returns pid, retcode, stdout and stderr."""
    return LocalCall("cmd.run_all", arg=[command], kwarg=_kwarg(cwd, None, None), return_type=dict[str, Any])
