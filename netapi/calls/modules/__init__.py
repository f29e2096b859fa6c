"""
Typed call builders for commonly used execution modules.

    from netapi.calls.modules import cmd, test

    test.ping().call_sync(client, Glob("*"))
    cmd.run("uptime").call_sync(client, Glob("web*"))
"""
