"""
CLI Module.

Command-line front end built with Click.

Architecture:
- CLI is a thin presentation layer over netapi.client
- Calls authenticate inline (username/password/eauth); no session is kept
- Results are printed as JSON with rich

Usage:
    netapi --help
    netapi run test.ping -t '*'
    netapi stats
"""
